from __future__ import annotations

import logging
from dataclasses import dataclass

from app.entities.errors import EncodingError, StudioError
from app.entities.media import EncodedMedia
from app.services.ImageService.image_service_interface import ImageServiceInterface
from app.services.MediaService.media_service_interface import (
    MediaServiceInterface,
    MediaSource,
)


MISSING_INPUT_MESSAGE = "Please upload an image and enter a prompt."


@dataclass
class ImageEditorState:
    original_image: EncodedMedia | None = None
    edited_image: EncodedMedia | None = None
    prompt: str = ""
    is_loading: bool = False
    error: str | None = None


class ImageEditorPage:
    def __init__(
        self,
        media_service: MediaServiceInterface,
        image_service: ImageServiceInterface,
        logger: logging.Logger,
    ) -> None:
        self.media_service = media_service
        self.image_service = image_service
        self.logger = logger
        self.state = ImageEditorState()

    async def upload(self, source: MediaSource, mime_type: str | None = None) -> bool:
        try:
            media = await self.media_service.encode(source, mime_type)
        except EncodingError as e:
            self.logger.warning("Rejected upload: %s", e)
            self.state.error = str(e)
            return False

        self.state.original_image = media
        self.state.edited_image = None
        self.state.error = None
        return True

    def set_prompt(self, prompt: str) -> None:
        self.state.prompt = prompt

    async def submit(self) -> EncodedMedia | None:
        state = self.state
        if state.original_image is None or not state.prompt.strip():
            state.error = MISSING_INPUT_MESSAGE
            return None

        state.is_loading = True
        state.error = None
        state.edited_image = None
        try:
            state.edited_image = await self.image_service.transform_image(
                state.original_image, state.prompt
            )
            return state.edited_image
        except StudioError as e:
            self.logger.error("Image edit failed: %s", e)
            state.error = str(e) or "An unknown error occurred."
            return None
        finally:
            state.is_loading = False
