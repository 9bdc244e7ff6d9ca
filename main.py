import asyncio

from app.cli.studio_cli import main


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
