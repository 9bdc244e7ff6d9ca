from typing import TypedDict, Literal


class ChatTurn(TypedDict):
    """Single entry of a conversation transcript."""

    role: Literal["user", "model"]
    text: str
