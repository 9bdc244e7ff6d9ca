from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from app.entities.errors import (
    EncodingError,
    GenerationCancelledError,
    StudioError,
    UpstreamError,
)
from app.entities.generation_job import (
    SUPPORTED_ASPECT_RATIOS,
    AspectRatio,
    VideoResource,
)
from app.entities.media import EncodedMedia
from app.services.CredentialService.credential_service_interface import (
    CredentialServiceInterface,
)
from app.services.MediaService.media_service_interface import (
    MediaServiceInterface,
    MediaSource,
)
from app.services.VideoService.video_service_interface import VideoServiceInterface


DEFAULT_VIDEO_PROMPT = "An epic cinematic shot of this image coming to life"
MISSING_INPUT_MESSAGE = "Please upload an image and enter a prompt."
MISSING_KEY_MESSAGE = "Please select your API key before generating a video."
AUTH_ERROR_MESSAGE = "API Key error. Please re-select your API key."


@dataclass
class VideoGeneratorState:
    source_image: EncodedMedia | None = None
    video: VideoResource | None = None
    prompt: str = DEFAULT_VIDEO_PROMPT
    aspect_ratio: AspectRatio = "16:9"
    is_loading: bool = False
    loading_message: str = ""
    error: str | None = None
    is_key_selected: bool = False


class VideoGeneratorPage:
    def __init__(
        self,
        media_service: MediaServiceInterface,
        video_service: VideoServiceInterface,
        credential_service: CredentialServiceInterface,
        logger: logging.Logger,
    ) -> None:
        self.media_service = media_service
        self.video_service = video_service
        self.credential_service = credential_service
        self.logger = logger
        self.state = VideoGeneratorState()
        self._cancel_event: asyncio.Event | None = None

    async def check_api_key(self) -> bool:
        self.state.is_key_selected = await self.credential_service.ensure_api_key()
        return self.state.is_key_selected

    async def select_api_key(self) -> bool:
        try:
            await self.credential_service.select_api_key()
        except (StudioError, ValueError) as e:
            self.logger.error("API key selection failed: %s", e)
            self.state.error = str(e)
        self.state.is_key_selected = self.credential_service.key_selected
        return self.state.is_key_selected

    async def upload(self, source: MediaSource, mime_type: str | None = None) -> bool:
        try:
            media = await self.media_service.encode(source, mime_type)
        except EncodingError as e:
            self.logger.warning("Rejected upload: %s", e)
            self.state.error = str(e)
            return False

        self._release_video()
        self.state.source_image = media
        self.state.error = None
        return True

    def set_prompt(self, prompt: str) -> None:
        self.state.prompt = prompt

    def set_aspect_ratio(self, aspect_ratio: str) -> None:
        if aspect_ratio not in SUPPORTED_ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {aspect_ratio}")
        self.state.aspect_ratio = aspect_ratio  # type: ignore[assignment]

    async def submit(self) -> VideoResource | None:
        state = self.state
        if state.is_loading:
            self.logger.warning("Video generation already running, ignoring submit")
            return None
        if not state.is_key_selected:
            state.error = MISSING_KEY_MESSAGE
            return None
        if state.source_image is None or not state.prompt.strip():
            state.error = MISSING_INPUT_MESSAGE
            return None

        state.is_loading = True
        state.error = None
        self._release_video()
        self._cancel_event = asyncio.Event()

        try:
            state.video = await self.video_service.generate(
                state.source_image,
                state.prompt,
                state.aspect_ratio,
                on_progress=self._on_progress,
                cancel_event=self._cancel_event,
            )
            return state.video
        except GenerationCancelledError as e:
            self.logger.info("Video generation cancelled by user")
            state.error = str(e)
            return None
        except UpstreamError as e:
            self.logger.error("Video generation failed (%s): %s", e.kind.value, e)
            if e.is_auth_error:
                state.error = AUTH_ERROR_MESSAGE
                self.credential_service.invalidate()
                state.is_key_selected = False
            else:
                state.error = str(e) or "An unknown error occurred."
            return None
        except StudioError as e:
            self.logger.error("Video generation failed: %s", e)
            state.error = str(e) or "An unknown error occurred."
            return None
        finally:
            state.is_loading = False
            state.loading_message = ""
            self._cancel_event = None

    def cancel(self) -> None:
        if self._cancel_event is not None:
            self._cancel_event.set()

    def close(self) -> None:
        self.cancel()
        self._release_video()

    def _on_progress(self, message: str) -> None:
        self.state.loading_message = message

    def _release_video(self) -> None:
        if self.state.video is not None:
            self.state.video.release()
            self.state.video = None
