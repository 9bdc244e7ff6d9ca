from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from app.entities.media import EncodedMedia

MediaSource = bytes | bytearray | BinaryIO | str | Path


class MediaServiceInterface(ABC):
    @abstractmethod
    async def encode(
        self, source: MediaSource, mime_type: str | None = None
    ) -> EncodedMedia:
        """
        Read a media source and encode it as base64.

        Args:
            source: Raw bytes, a binary file object, or a path on disk
            mime_type: Declared content type; sniffed when omitted

        Raises:
            EncodingError: If the source cannot be read or is empty
        """

    @abstractmethod
    def decode(self, media: EncodedMedia) -> bytes:
        """Return the raw bytes of an encoded payload."""
