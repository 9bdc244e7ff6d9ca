import base64
import io
import logging
import random

import pytest
from PIL import Image

from app.entities.errors import EncodingError, MediaTooLargeError
from app.entities.media import EncodedMedia
from app.services.MediaService.media_service import DEFAULT_MIME_TYPE, MediaService


@pytest.fixture
def media_service() -> MediaService:
    return MediaService(logger=logging.getLogger("MediaServiceTest"), max_bytes=1024 * 1024)


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 10, 10)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.mark.asyncio
async def test_encode_then_decode_is_identity(media_service: MediaService) -> None:
    rng = random.Random(1234)
    mime_types = ["image/png", "image/jpeg", "video/mp4", "application/x-custom"]

    for _ in range(25):
        payload = bytes(rng.getrandbits(8) for _ in range(rng.randint(0, 4096)))
        mime_type = rng.choice(mime_types)

        media = await media_service.encode(payload, mime_type)

        assert media.mime_type == mime_type
        assert media_service.decode(media) == payload
        assert base64.b64decode(media.data) == payload


@pytest.mark.asyncio
async def test_encode_reads_file_path_and_sniffs_image_type(
    media_service: MediaService, tmp_path
) -> None:
    path = tmp_path / "room.bin"
    path.write_bytes(_png_bytes())

    media = await media_service.encode(path)

    assert media.mime_type == "image/png"
    assert media.raw_bytes() == path.read_bytes()


@pytest.mark.asyncio
async def test_encode_accepts_string_path(media_service: MediaService, tmp_path) -> None:
    path = tmp_path / "photo.png"
    path.write_bytes(_png_bytes())

    media = await media_service.encode(str(path), "image/png")

    assert media.size_bytes == path.stat().st_size


@pytest.mark.asyncio
async def test_encode_reads_binary_stream(media_service: MediaService) -> None:
    stream = io.BytesIO(b"\x00\x01binary payload")

    media = await media_service.encode(stream, "application/x-custom")

    assert media.raw_bytes() == b"\x00\x01binary payload"


@pytest.mark.asyncio
async def test_encode_guesses_type_from_file_name(
    media_service: MediaService, tmp_path
) -> None:
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"not really a video")

    media = await media_service.encode(path)

    assert media.mime_type == "video/mp4"


@pytest.mark.asyncio
async def test_encode_falls_back_to_octet_stream(media_service: MediaService) -> None:
    media = await media_service.encode(b"opaque bytes")

    assert media.mime_type == DEFAULT_MIME_TYPE


@pytest.mark.asyncio
async def test_encode_missing_file_raises(media_service: MediaService, tmp_path) -> None:
    with pytest.raises(EncodingError, match="Cannot read media file"):
        await media_service.encode(tmp_path / "missing.png")


@pytest.mark.asyncio
async def test_encode_text_stream_raises(media_service: MediaService) -> None:
    with pytest.raises(EncodingError, match="binary mode"):
        await media_service.encode(io.StringIO("text"))  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_encode_closed_stream_raises(media_service: MediaService) -> None:
    stream = io.BytesIO(b"data")
    stream.close()

    with pytest.raises(EncodingError, match="Cannot read media stream"):
        await media_service.encode(stream)


@pytest.mark.asyncio
async def test_encode_unsupported_source_raises(media_service: MediaService) -> None:
    with pytest.raises(EncodingError, match="Unsupported media source"):
        await media_service.encode(12345)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_encode_empty_payload_round_trips(media_service: MediaService) -> None:
    media = await media_service.encode(b"", "image/png")

    assert media.data == ""
    assert media.mime_type == "image/png"
    assert media_service.decode(media) == b""


@pytest.mark.asyncio
async def test_encode_empty_file_without_type_uses_name(
    media_service: MediaService, tmp_path
) -> None:
    path = tmp_path / "blank.png"
    path.write_bytes(b"")

    media = await media_service.encode(path)

    assert media.mime_type == "image/png"
    assert media_service.decode(media) == b""


@pytest.mark.asyncio
async def test_encode_oversized_payload_raises() -> None:
    service = MediaService(logger=logging.getLogger("MediaServiceTest"), max_bytes=8)

    with pytest.raises(MediaTooLargeError) as exc_info:
        await service.encode(b"0123456789", "image/png")

    assert exc_info.value.size_bytes == 10
    assert exc_info.value.limit_bytes == 8


def test_decode_malformed_payload_raises(media_service: MediaService) -> None:
    with pytest.raises(EncodingError, match="Malformed"):
        media_service.decode(EncodedMedia(data="not base64!!", mime_type="image/png"))
