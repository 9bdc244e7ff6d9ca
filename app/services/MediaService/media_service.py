from __future__ import annotations

import asyncio
import binascii
import logging
import mimetypes
import os
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from app.entities.errors import EncodingError, MediaTooLargeError
from app.entities.media import EncodedMedia
from app.services.MediaService.media_service_interface import (
    MediaServiceInterface,
    MediaSource,
)


DEFAULT_MIME_TYPE = "application/octet-stream"


class MediaService(MediaServiceInterface):
    def __init__(
        self,
        logger: logging.Logger,
        max_bytes: int | None = 20 * 1024 * 1024,
    ) -> None:
        self.logger = logger
        self.max_bytes = max_bytes

    async def encode(
        self, source: MediaSource, mime_type: str | None = None
    ) -> EncodedMedia:
        """
        Read ``source`` and wrap it as base64 media.

        Empty sources encode to empty media; the image and video clients
        reject empty payloads before any request is made.
        """
        payload, file_name = await asyncio.to_thread(self._read_source, source)

        if self.max_bytes is not None and len(payload) > self.max_bytes:
            raise MediaTooLargeError(len(payload), self.max_bytes)

        resolved_mime = mime_type or self._detect_mime_type(payload, file_name)

        self.logger.debug(
            "Encoded %d bytes as %s (source: %s)",
            len(payload),
            resolved_mime,
            file_name or type(source).__name__,
        )
        return EncodedMedia.from_bytes(payload, resolved_mime)

    def decode(self, media: EncodedMedia) -> bytes:
        try:
            return media.raw_bytes()
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"Malformed base64 payload: {e}") from e

    def _read_source(self, source: MediaSource) -> tuple[bytes, str | None]:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source), None

        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                return path.read_bytes(), path.name
            except OSError as e:
                raise EncodingError(f"Cannot read media file {path}: {e}") from e

        read = getattr(source, "read", None)
        if read is None:
            raise EncodingError(f"Unsupported media source: {type(source).__name__}")

        try:
            data = read()
        except (OSError, ValueError) as e:
            raise EncodingError(f"Cannot read media stream: {e}") from e

        if not isinstance(data, (bytes, bytearray)):
            raise EncodingError("Media stream must be opened in binary mode")

        name = getattr(source, "name", None)
        file_name = os.path.basename(name) if isinstance(name, str) else None
        return bytes(data), file_name

    def _detect_mime_type(self, payload: bytes, file_name: str | None) -> str:
        try:
            with Image.open(BytesIO(payload)) as image:
                image_format = image.format
        except (UnidentifiedImageError, OSError):
            image_format = None

        if image_format and image_format in Image.MIME:
            return Image.MIME[image_format]

        if file_name:
            guessed, _ = mimetypes.guess_type(file_name)
            if guessed:
                return guessed

        self.logger.warning(
            "Could not determine media type for %s, using %s",
            file_name or "payload",
            DEFAULT_MIME_TYPE,
        )
        return DEFAULT_MIME_TYPE
