import base64
import binascii
from dataclasses import dataclass


@dataclass(frozen=True)
class EncodedMedia:
    """Image or video payload encoded as base64, paired with its content type."""

    data: str
    mime_type: str

    @classmethod
    def from_bytes(cls, payload: bytes, mime_type: str) -> "EncodedMedia":
        return cls(data=base64.b64encode(payload).decode("ascii"), mime_type=mime_type)

    def raw_bytes(self) -> bytes:
        """Decode the payload. Raises binascii.Error for malformed base64."""
        return base64.b64decode(self.data, validate=True)

    @property
    def size_bytes(self) -> int:
        try:
            return len(self.raw_bytes())
        except binascii.Error:
            return 0

    def __repr__(self) -> str:
        # Payloads are large; keep them out of logs and tracebacks.
        return f"EncodedMedia(mime_type={self.mime_type!r}, chars={len(self.data)})"
