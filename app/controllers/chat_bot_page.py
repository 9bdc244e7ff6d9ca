from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.entities.errors import StudioError
from app.entities.message import ChatTurn
from app.services.ChatService.chat_service_interface import ChatServiceInterface
from app.services.ChatService.chat_session import ChatSession


CHAT_FALLBACK_REPLY = "Sorry, I encountered an error."


@dataclass
class ChatBotState:
    is_loading: bool = False
    error: str | None = None
    messages: list[ChatTurn] = field(default_factory=list)


class ChatBotPage:
    def __init__(
        self,
        chat_service: ChatServiceInterface,
        logger: logging.Logger,
        system_instruction: str | None = None,
    ) -> None:
        self.chat_service = chat_service
        self.logger = logger
        self.system_instruction = system_instruction
        self.state = ChatBotState()
        self.session: ChatSession | None = None

    def reset(self, system_instruction: str | None = None) -> None:
        """Drop the conversation; the next message opens a fresh session."""
        if system_instruction is not None:
            self.system_instruction = system_instruction
        self.session = None
        self.state = ChatBotState()

    async def send(self, text: str) -> str | None:
        if not text.strip() or self.state.is_loading:
            return None

        state = self.state
        state.messages.append({"role": "user", "text": text})
        state.is_loading = True
        state.error = None

        try:
            if self.session is None:
                self.session = self.chat_service.open_standard_session(
                    self.system_instruction
                )
            reply = await self.chat_service.send_turn(self.session, text)
            state.messages.append({"role": "model", "text": reply})
            return reply
        except StudioError as e:
            self.logger.error("Chat message failed: %s", e)
            state.error = str(e)
            state.messages.append({"role": "model", "text": CHAT_FALLBACK_REPLY})
            if self.session is not None and len(self.session) % 2 == 1:
                self.session.append_fallback_turn(CHAT_FALLBACK_REPLY)
            return None
        finally:
            state.is_loading = False
