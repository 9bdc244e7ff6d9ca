from __future__ import annotations

import logging
from typing import Literal, get_args

import httpx

from app.controllers.chat_bot_page import ChatBotPage
from app.controllers.image_editor_page import ImageEditorPage
from app.controllers.interior_designer_page import InteriorDesignerPage
from app.controllers.video_generator_page import VideoGeneratorPage


Page = Literal["designer", "editor", "video", "chat"]
PAGES: tuple[str, ...] = get_args(Page)
DEFAULT_PAGE: Page = "designer"


class Studio:
    """Routes between the studio pages and owns their shared resources."""

    def __init__(
        self,
        designer: InteriorDesignerPage,
        editor: ImageEditorPage,
        video: VideoGeneratorPage,
        chat: ChatBotPage,
        http_client: httpx.AsyncClient,
        logger: logging.Logger,
    ) -> None:
        self.designer = designer
        self.editor = editor
        self.video = video
        self.chat = chat
        self.http_client = http_client
        self.logger = logger
        self.active_page: Page = DEFAULT_PAGE

    def navigate(self, page: str) -> Page:
        if page not in PAGES:
            self.logger.warning("Unknown page %r, showing %s", page, DEFAULT_PAGE)
            self.active_page = DEFAULT_PAGE
        else:
            self.active_page = page  # type: ignore[assignment]
        return self.active_page

    @property
    def current_page(
        self,
    ) -> InteriorDesignerPage | ImageEditorPage | VideoGeneratorPage | ChatBotPage:
        return {
            "designer": self.designer,
            "editor": self.editor,
            "video": self.video,
            "chat": self.chat,
        }[self.active_page]

    async def close(self) -> None:
        self.video.close()
        await self.http_client.aclose()
