from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeySelectorProtocol(Protocol):
    """Host-provided flow that lets the user pick an API key."""

    async def has_selected_api_key(self) -> bool: ...

    async def open_select_key(self) -> str | None: ...


class CredentialServiceInterface(ABC):
    @property
    @abstractmethod
    def key_selected(self) -> bool:
        pass

    @abstractmethod
    async def ensure_api_key(self) -> bool:
        """Return True when a key is available, asking the host selector if needed."""

    @abstractmethod
    async def select_api_key(self) -> bool:
        """Open the host key selection flow."""

    @abstractmethod
    def invalidate(self) -> None:
        """Forget the current selection so the next call re-acquires a key."""
