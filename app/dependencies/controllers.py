import httpx

from app.bootstrap.components import Components
from app.components.logger.logger_interface import LoggerInterface
from app.controllers.chat_bot_page import ChatBotPage
from app.controllers.image_editor_page import ImageEditorPage
from app.controllers.interior_designer_page import InteriorDesignerPage
from app.controllers.studio import Studio
from app.controllers.video_generator_page import VideoGeneratorPage
from app.dependencies.services import (
    get_chat_service,
    get_credential_service,
    get_image_service,
    get_media_service,
    get_video_service,
)
from app.services.CredentialService.credential_service_interface import (
    KeySelectorProtocol,
)


def get_studio(
    components: Components, key_selector: KeySelectorProtocol | None = None
) -> Studio:
    logger = components.get_component(LoggerInterface)
    media_service = get_media_service(components)
    image_service = get_image_service(components)
    chat_service = get_chat_service(components)

    return Studio(
        designer=InteriorDesignerPage(
            media_service=media_service,
            image_service=image_service,
            chat_service=chat_service,
            logger=logger.get_logger("InteriorDesignerPage"),
        ),
        editor=ImageEditorPage(
            media_service=media_service,
            image_service=image_service,
            logger=logger.get_logger("ImageEditorPage"),
        ),
        video=VideoGeneratorPage(
            media_service=media_service,
            video_service=get_video_service(components),
            credential_service=get_credential_service(components, key_selector),
            logger=logger.get_logger("VideoGeneratorPage"),
        ),
        chat=ChatBotPage(
            chat_service=chat_service,
            logger=logger.get_logger("ChatBotPage"),
        ),
        http_client=components.get_component(httpx.AsyncClient),
        logger=logger.get_logger("Studio"),
    )
