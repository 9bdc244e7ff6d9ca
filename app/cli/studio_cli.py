"""Terminal front end that drives the studio pages."""

from __future__ import annotations

import argparse
import asyncio
import shutil
import sys
from pathlib import Path

from app.bootstrap.bootstrapper import bootstrap_studio
from app.cli.key_selector import TerminalKeySelector
from app.controllers.interior_designer_page import DESIGN_STYLES
from app.controllers.studio import Studio
from app.controllers.video_generator_page import VideoGeneratorPage
from app.entities.media import EncodedMedia


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genai-studio",
        description="Edit images, restyle rooms, animate pictures and chat with Gemini.",
    )
    parser.add_argument(
        "--env",
        default="development",
        choices=["development", "staging", "production"],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    edit = subparsers.add_parser("edit", help="Edit an image with a text instruction")
    edit.add_argument("image", type=Path)
    edit.add_argument("--prompt", required=True)
    edit.add_argument("--output", type=Path, default=Path("edited.png"))

    design = subparsers.add_parser("design", help="Restyle a room photo")
    design.add_argument("image", type=Path)
    design.add_argument("--style", choices=DESIGN_STYLES, required=True)
    design.add_argument(
        "--refine",
        action="append",
        default=[],
        help="Follow-up change, may be repeated",
    )
    design.add_argument("--output", type=Path, default=Path("design.png"))

    video = subparsers.add_parser("video", help="Animate an image into a video")
    video.add_argument("image", type=Path)
    video.add_argument("--prompt", default=None)
    video.add_argument("--aspect-ratio", choices=["16:9", "9:16"], default="16:9")
    video.add_argument("--output", type=Path, default=Path("video.mp4"))

    chat = subparsers.add_parser("chat", help="Interactive chat")
    chat.add_argument("--system", default=None, help="System instruction")

    return parser


def _write_image(media: EncodedMedia, output: Path) -> None:
    output.write_bytes(media.raw_bytes())
    print(f"Saved {output}")


def _fail(message: str | None) -> int:
    print(f"Error: {message or 'unknown error'}", file=sys.stderr)
    return 1


async def run_edit(studio: Studio, args: argparse.Namespace) -> int:
    page = studio.editor
    studio.navigate("editor")
    if not await page.upload(args.image):
        return _fail(page.state.error)

    page.set_prompt(args.prompt)
    result = await page.submit()
    if result is None:
        return _fail(page.state.error)

    _write_image(result, args.output)
    return 0


async def run_design(studio: Studio, args: argparse.Namespace) -> int:
    page = studio.designer
    studio.navigate("designer")
    if not await page.upload(args.image):
        return _fail(page.state.error)

    if await page.apply_style(args.style) is None:
        return _fail(page.state.error)

    for change in args.refine:
        reply = await page.refine(change)
        if reply is not None:
            print(f"designer> {reply}")
        elif page.state.error:
            print(f"designer> {page.state.error}", file=sys.stderr)

    if page.state.generated_image is not None:
        _write_image(page.state.generated_image, args.output)
    return 0 if page.state.error is None else _fail(page.state.error)


async def run_video(studio: Studio, args: argparse.Namespace) -> int:
    page = studio.video
    studio.navigate("video")

    if not await page.check_api_key():
        await page.select_api_key()

    if not await page.upload(args.image):
        return _fail(page.state.error)

    if args.prompt:
        page.set_prompt(args.prompt)
    page.set_aspect_ratio(args.aspect_ratio)

    progress_task = asyncio.create_task(_echo_progress(page))
    try:
        video = await page.submit()
    finally:
        progress_task.cancel()

    if video is None:
        return _fail(page.state.error)

    await asyncio.to_thread(shutil.copyfile, video.path, args.output)
    print(f"Saved {args.output}")
    return 0


async def _echo_progress(page: VideoGeneratorPage) -> None:
    last = ""
    while True:
        message = page.state.loading_message
        if message and message != last:
            print(message)
            last = message
        await asyncio.sleep(0.5)


async def run_chat(studio: Studio, args: argparse.Namespace) -> int:
    page = studio.chat
    studio.navigate("chat")
    page.reset(args.system)
    print("Ask Gemini anything... (empty line to quit)")

    while True:
        text = await asyncio.to_thread(input, "you> ")
        if not text.strip():
            return 0
        await page.send(text)
        print(f"gemini> {page.state.messages[-1]['text']}")


COMMANDS = {
    "edit": run_edit,
    "design": run_design,
    "video": run_video,
    "chat": run_chat,
}


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    studio = await bootstrap_studio(env=args.env, key_selector=TerminalKeySelector())
    try:
        return await COMMANDS[args.command](studio, args)
    finally:
        await studio.close()


def run() -> None:
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        raise SystemExit(130)
