from __future__ import annotations

from typing import Literal

from google.genai.chats import AsyncChat

from app.entities.message import ChatTurn


class ChatSession:
    """
    Stateful conversation bound to one model.

    The SDK chat keeps the running context sent upstream; ``transcript``
    is the ordered record of what was said, including fallback turns
    appended after failures.
    """

    def __init__(
        self,
        model_id: str,
        system_instruction: str | None,
        chat: AsyncChat,
    ) -> None:
        self.model_id = model_id
        self.system_instruction = system_instruction
        self.chat = chat
        self._transcript: list[ChatTurn] = []

    @property
    def transcript(self) -> list[ChatTurn]:
        return list(self._transcript)

    def append_turn(self, role: Literal["user", "model"], text: str) -> None:
        self._transcript.append({"role": role, "text": text})

    def append_fallback_turn(self, text: str) -> None:
        """Record a model-side message that was not produced by the model."""
        self.append_turn("model", text)

    def __len__(self) -> int:
        return len(self._transcript)
