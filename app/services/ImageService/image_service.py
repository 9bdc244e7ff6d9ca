"""
Image transformation through a Gemini image model.

One request per call: the source image and the instruction travel together
and the first inline image of the response is returned. No retries.
"""

from __future__ import annotations

import binascii
import logging

import httpx
from google.genai import errors as genai_errors
from google.genai import types
from langfuse import observe

from app.components.genai.genai_client_provider import GenAIClientProvider
from app.entities.errors import (
    EncodingError,
    MissingInputError,
    NoImageReturnedError,
    UpstreamError,
)
from app.entities.media import EncodedMedia
from app.services.ImageService.image_service_interface import ImageServiceInterface


OUTPUT_MIME_TYPE = "image/png"


class ImageService(ImageServiceInterface):
    def __init__(
        self,
        client_provider: GenAIClientProvider,
        model_name: str,
        logger: logging.Logger,
    ) -> None:
        self.client_provider = client_provider
        self.model_name = model_name
        self.logger = logger

    @observe(capture_input=False, capture_output=False)
    async def transform_image(
        self, image: EncodedMedia | None, instruction: str
    ) -> EncodedMedia:
        if not instruction or not instruction.strip():
            raise MissingInputError("An instruction is required to transform an image")
        if image is None or not image.data:
            raise MissingInputError("An image is required to transform")

        try:
            image_bytes = image.raw_bytes()
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"Malformed image payload: {e}") from e

        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_bytes(data=image_bytes, mime_type=image.mime_type),
                    types.Part.from_text(text=instruction),
                ],
            )
        ]
        config = types.GenerateContentConfig(response_modalities=["IMAGE"])

        self.logger.info(
            "Transforming %s image (%d bytes) with model %s",
            image.mime_type,
            len(image_bytes),
            self.model_name,
        )

        try:
            client = self.client_provider.client
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            self.logger.error("Image transformation request failed: %s", e)
            raise UpstreamError.from_exception(e) from e

        return self._extract_image(response)

    def _extract_image(self, response: types.GenerateContentResponse) -> EncodedMedia:
        candidates = response.candidates or []
        parts = []
        if candidates and candidates[0].content and candidates[0].content.parts:
            parts = candidates[0].content.parts

        texts: list[str] = []
        for part in parts:
            inline_data = part.inline_data
            if inline_data is not None and inline_data.data:
                self.logger.info(
                    "Received transformed image (%d bytes)", len(inline_data.data)
                )
                return EncodedMedia.from_bytes(inline_data.data, OUTPUT_MIME_TYPE)
            if part.text:
                texts.append(part.text)

        detail = "\n".join(texts) or None
        self.logger.warning(
            "Image model returned %d parts without image data", len(parts)
        )
        raise NoImageReturnedError(detail)
