import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.entities.media import EncodedMedia


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("ControllerTest")


@pytest.fixture
def room_image() -> EncodedMedia:
    return EncodedMedia.from_bytes(b"room-png", "image/png")


@pytest.fixture
def media_service(room_image: EncodedMedia) -> MagicMock:
    service = MagicMock()
    service.encode = AsyncMock(return_value=room_image)
    return service


@pytest.fixture
def image_service() -> MagicMock:
    service = MagicMock()
    service.transform_image = AsyncMock(
        side_effect=lambda image, instruction: EncodedMedia.from_bytes(
            instruction.encode(), "image/png"
        )
    )
    return service
