from abc import ABC, abstractmethod

from app.services.ChatService.chat_session import ChatSession


class ChatServiceInterface(ABC):
    @abstractmethod
    def open_session(
        self, model_id: str, system_instruction: str | None = None
    ) -> ChatSession:
        """Create a session bound to ``model_id``. No network call is made."""

    @abstractmethod
    def open_standard_session(self, system_instruction: str | None = None) -> ChatSession:
        """Open a session on the fast, low-cost model."""

    @abstractmethod
    def open_pro_session(self, system_instruction: str | None = None) -> ChatSession:
        """Open a session on the more capable model."""

    @abstractmethod
    async def send_turn(self, session: ChatSession, text: str) -> str:
        """
        Send one user message on the session and return the model reply.

        The user turn and the reply are appended to the session transcript.

        Raises:
            MissingInputError: If ``text`` is blank
            UpstreamError: On transport or auth failures
        """
