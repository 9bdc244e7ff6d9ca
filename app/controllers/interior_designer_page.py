"""
Interior design page: restyle an uploaded room, then refine it by chat.

Each refinement re-renders the current design with the image model and asks
a pro-tier chat session for a short acknowledgement. A failed request leaves
the last good design in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.entities.errors import EncodingError, StudioError
from app.entities.media import EncodedMedia
from app.entities.message import ChatTurn
from app.services.ChatService.chat_service_interface import ChatServiceInterface
from app.services.ChatService.chat_session import ChatSession
from app.services.ImageService.image_service_interface import ImageServiceInterface
from app.services.MediaService.media_service_interface import (
    MediaServiceInterface,
    MediaSource,
)


DESIGN_STYLES: tuple[str, ...] = (
    "Mid-Century Modern",
    "Scandinavian",
    "Traditional",
    "Bohemian",
    "Industrial",
    "Minimalist",
)

ORIGINAL_STYLE = "Original"

DESIGNER_SYSTEM_INSTRUCTION = (
    "You are an interior design assistant. Your responses should be short, "
    "friendly, and helpful. You are helping a user refine a design you've created."
)

STYLE_PROMPT = (
    "Redesign this room in a {style} style. Be creative but keep the original room layout."
)
REFINE_PROMPT = (
    'Given this image of a room designed in a {style} style, apply the following '
    'change: "{change}". Only show the final image.'
)
ACKNOWLEDGE_PROMPT = 'The user wants to: "{change}". Acknowledge the change has been made.'

REFINE_FALLBACK_REPLY = "Sorry, I couldn't apply that change."


@dataclass
class InteriorDesignerState:
    original_image: EncodedMedia | None = None
    generated_image: EncodedMedia | None = None
    current_style: str = ""
    is_loading: bool = False
    is_chat_loading: bool = False
    loading_text: str = ""
    error: str | None = None
    messages: list[ChatTurn] = field(default_factory=list)


class InteriorDesignerPage:
    def __init__(
        self,
        media_service: MediaServiceInterface,
        image_service: ImageServiceInterface,
        chat_service: ChatServiceInterface,
        logger: logging.Logger,
    ) -> None:
        self.media_service = media_service
        self.image_service = image_service
        self.chat_service = chat_service
        self.logger = logger
        self.state = InteriorDesignerState()
        self.session: ChatSession | None = None

    async def upload(self, source: MediaSource, mime_type: str | None = None) -> bool:
        """Start a new design from an uploaded room photo."""
        try:
            media = await self.media_service.encode(source, mime_type)
        except EncodingError as e:
            self.logger.warning("Rejected room upload: %s", e)
            self.state.error = str(e)
            return False

        # The "after" view starts as the untouched original.
        self.state = InteriorDesignerState(
            original_image=media,
            generated_image=media,
            current_style=ORIGINAL_STYLE,
        )

        try:
            self.session = self.chat_service.open_pro_session(DESIGNER_SYSTEM_INSTRUCTION)
        except StudioError as e:
            self.logger.error("Could not open the design chat: %s", e)
            self.session = None
            self.state.error = str(e)
        return True

    async def apply_style(self, style: str) -> EncodedMedia | None:
        state = self.state
        if state.original_image is None:
            return None

        state.is_loading = True
        state.loading_text = f"Reimagining in {style} style..."
        state.error = None
        try:
            result = await self.image_service.transform_image(
                state.original_image, STYLE_PROMPT.format(style=style)
            )
            state.generated_image = result
            state.current_style = style
            return result
        except StudioError as e:
            self.logger.error("Restyle to %s failed: %s", style, e)
            state.error = str(e) or "Failed to generate image."
            return None
        finally:
            state.is_loading = False
            state.loading_text = ""

    async def refine(self, change: str) -> str | None:
        """Apply a free-text change to the current design. Returns the chat reply."""
        state = self.state
        if not change.strip() or state.generated_image is None or self.session is None:
            return None

        session = self.session
        state.messages.append({"role": "user", "text": change})
        state.is_loading = True
        state.is_chat_loading = True
        state.loading_text = f'Applying change: "{change}"'
        state.error = None

        try:
            refined = await self.image_service.transform_image(
                state.generated_image,
                REFINE_PROMPT.format(style=state.current_style, change=change),
            )
            state.generated_image = refined

            reply = await self.chat_service.send_turn(
                session, ACKNOWLEDGE_PROMPT.format(change=change)
            )
            state.messages.append({"role": "model", "text": reply})
            return reply
        except StudioError as e:
            self.logger.error("Design refinement failed: %s", e)
            state.error = str(e) or "Failed to refine design."
            state.messages.append({"role": "model", "text": REFINE_FALLBACK_REPLY})
            if len(session) % 2 == 1:
                session.append_fallback_turn(REFINE_FALLBACK_REPLY)
            return None
        finally:
            state.is_loading = False
            state.is_chat_loading = False
            state.loading_text = ""
