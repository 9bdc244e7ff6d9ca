from __future__ import annotations

import logging

import httpx
from google.genai import errors as genai_errors
from google.genai import types
from langfuse import observe

from app.components.genai.genai_client_provider import GenAIClientProvider
from app.entities.errors import MissingInputError, UpstreamError
from app.services.ChatService.chat_service_interface import ChatServiceInterface
from app.services.ChatService.chat_session import ChatSession


class ChatService(ChatServiceInterface):
    def __init__(
        self,
        client_provider: GenAIClientProvider,
        model_name: str,
        pro_model_name: str,
        logger: logging.Logger,
    ) -> None:
        self.client_provider = client_provider
        self.model_name = model_name
        self.pro_model_name = pro_model_name
        self.logger = logger

    def open_session(
        self, model_id: str, system_instruction: str | None = None
    ) -> ChatSession:
        if not model_id:
            raise MissingInputError("A model identifier is required to open a chat")

        config = (
            types.GenerateContentConfig(system_instruction=system_instruction)
            if system_instruction
            else None
        )
        chat = self.client_provider.client.aio.chats.create(
            model=model_id, config=config
        )
        self.logger.info(
            "Opened chat session on %s (system instruction: %s)",
            model_id,
            bool(system_instruction),
        )
        return ChatSession(
            model_id=model_id, system_instruction=system_instruction, chat=chat
        )

    def open_standard_session(self, system_instruction: str | None = None) -> ChatSession:
        return self.open_session(self.model_name, system_instruction)

    def open_pro_session(self, system_instruction: str | None = None) -> ChatSession:
        return self.open_session(self.pro_model_name, system_instruction)

    @observe()
    async def send_turn(self, session: ChatSession, text: str) -> str:
        if not text or not text.strip():
            raise MissingInputError("Message text must not be empty")

        session.append_turn("user", text)

        try:
            response = await session.chat.send_message(text)
        except (genai_errors.APIError, httpx.HTTPError) as e:
            self.logger.error("Chat turn on %s failed: %s", session.model_id, e)
            raise UpstreamError.from_exception(e) from e

        reply = response.text or ""
        if not reply:
            self.logger.warning("Model %s returned an empty reply", session.model_id)

        session.append_turn("model", reply)
        return reply
