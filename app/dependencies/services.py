import httpx

from app.bootstrap.components import Components
from app.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from app.components.genai.genai_client_provider import GenAIClientProvider
from app.components.logger.logger_interface import LoggerInterface
from app.services.ChatService.chat_service import ChatService
from app.services.ChatService.chat_service_interface import ChatServiceInterface
from app.services.CredentialService.credential_service import CredentialService
from app.services.CredentialService.credential_service_interface import (
    CredentialServiceInterface,
    KeySelectorProtocol,
)
from app.services.ImageService.image_service import ImageService
from app.services.ImageService.image_service_interface import ImageServiceInterface
from app.services.MediaService.media_service import MediaService
from app.services.MediaService.media_service_interface import MediaServiceInterface
from app.services.VideoService.video_service import VideoService
from app.services.VideoService.video_service_interface import VideoServiceInterface


def get_media_service(components: Components) -> MediaServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    return MediaService(
        logger=components.get_component(LoggerInterface).get_logger("MediaService"),
        max_bytes=configuration.get_configuration(
            "MAX_UPLOAD_BYTES", int, default=20 * 1024 * 1024
        ),
    )


def get_image_service(components: Components) -> ImageServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    return ImageService(
        client_provider=components.get_component(GenAIClientProvider),
        model_name=configuration.get_configuration(
            "IMAGE_MODEL_NAME", str, default="gemini-2.5-flash-image"
        ),
        logger=components.get_component(LoggerInterface).get_logger("ImageService"),
    )


def get_video_service(components: Components) -> VideoServiceInterface:
    """
    Create the Veo video service.

    VIDEO_POLL_TIMEOUT_SECONDS=0 disables the polling deadline.
    """
    configuration = components.get_component(ConfigurationInterface)

    return VideoService(
        client_provider=components.get_component(GenAIClientProvider),
        http_client=components.get_component(httpx.AsyncClient),
        model_name=configuration.get_configuration(
            "VIDEO_MODEL_NAME", str, default="veo-3.1-fast-generate-preview"
        ),
        logger=components.get_component(LoggerInterface).get_logger("VideoService"),
        resolution=configuration.get_configuration(
            "VIDEO_RESOLUTION", str, default="720p"
        ),
        poll_interval=configuration.get_configuration(
            "VIDEO_POLL_INTERVAL_SECONDS", float, default=10.0
        ),
        poll_timeout=configuration.get_configuration(
            "VIDEO_POLL_TIMEOUT_SECONDS", float, default=900.0
        ),
        status_check_attempts=configuration.get_configuration(
            "VIDEO_STATUS_CHECK_ATTEMPTS", int, default=1
        ),
        download_timeout=configuration.get_configuration(
            "VIDEO_DOWNLOAD_TIMEOUT_SECONDS", float, default=120.0
        ),
        output_dir=configuration.get_configuration("VIDEO_OUTPUT_DIR", str),
    )


def get_chat_service(components: Components) -> ChatServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    return ChatService(
        client_provider=components.get_component(GenAIClientProvider),
        model_name=configuration.get_configuration(
            "MODEL_NAME", str, default="gemini-2.5-flash"
        ),
        pro_model_name=configuration.get_configuration(
            "MODEL_NAME_PRO", str, default="gemini-2.5-pro"
        ),
        logger=components.get_component(LoggerInterface).get_logger("ChatService"),
    )


def get_credential_service(
    components: Components, key_selector: KeySelectorProtocol | None = None
) -> CredentialServiceInterface:
    return CredentialService(
        client_provider=components.get_component(GenAIClientProvider),
        logger=components.get_component(LoggerInterface).get_logger(
            "CredentialService"
        ),
        key_selector=key_selector,
    )
