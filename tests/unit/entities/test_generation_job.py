import pytest

from app.entities.generation_job import VideoResource
from app.entities.media import EncodedMedia


def test_video_resource_release_removes_file(tmp_path):
    path = tmp_path / "video.mp4"
    path.write_bytes(b"video")
    resource = VideoResource(
        path=str(path), mime_type="video/mp4", source_uri="https://x", size_bytes=5
    )

    assert resource.read_bytes() == b"video"

    resource.release()
    resource.release()

    assert resource.released is True
    assert not path.exists()
    with pytest.raises(ValueError):
        resource.read_bytes()


def test_video_resource_release_tolerates_missing_file(tmp_path):
    resource = VideoResource(
        path=str(tmp_path / "gone.mp4"),
        mime_type="video/mp4",
        source_uri="https://x",
        size_bytes=0,
    )

    resource.release()

    assert resource.released is True


def test_encoded_media_is_immutable_and_hides_payload_in_repr():
    media = EncodedMedia.from_bytes(b"abc", "image/png")

    with pytest.raises(AttributeError):
        media.data = "other"  # type: ignore[misc]

    assert "YWJj" not in repr(media)
    assert media.size_bytes == 3
