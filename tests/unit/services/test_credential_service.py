import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.cli.key_selector import TerminalKeySelector
from app.components.genai.genai_client_provider import GenAIClientProvider
from app.services.CredentialService.credential_service import CredentialService
from app.services.CredentialService.credential_service_interface import (
    KeySelectorProtocol,
)


class FakeKeySelector:
    def __init__(self, selected: bool = False, key: str | None = "new-key") -> None:
        self.selected = selected
        self.key = key
        self.opened = 0

    async def has_selected_api_key(self) -> bool:
        return self.selected

    async def open_select_key(self) -> str | None:
        self.opened += 1
        self.selected = True
        return self.key


@pytest.fixture
def provider() -> MagicMock:
    return MagicMock(has_api_key=False, api_key=None)


def _service(provider, selector=None) -> CredentialService:
    return CredentialService(
        client_provider=provider,
        logger=logging.getLogger("CredentialServiceTest"),
        key_selector=selector,
    )


def test_fake_selector_satisfies_protocol() -> None:
    assert isinstance(FakeKeySelector(), KeySelectorProtocol)


@pytest.mark.asyncio
async def test_without_selector_key_is_assumed_present(provider) -> None:
    service = _service(provider)

    assert await service.ensure_api_key() is True
    assert service.key_selected is True


@pytest.mark.asyncio
async def test_ensure_reports_missing_selection(provider) -> None:
    service = _service(provider, FakeKeySelector(selected=False))

    assert await service.ensure_api_key() is False
    assert service.key_selected is False


@pytest.mark.asyncio
async def test_ensure_is_cached_once_selected(provider) -> None:
    selector = SimpleNamespace(
        has_selected_api_key=AsyncMock(return_value=True),
        open_select_key=AsyncMock(),
    )
    service = _service(provider, selector)

    assert await service.ensure_api_key() is True
    assert await service.ensure_api_key() is True
    selector.has_selected_api_key.assert_awaited_once()


@pytest.mark.asyncio
async def test_select_rotates_client_key(provider) -> None:
    selector = FakeKeySelector()
    service = _service(provider, selector)

    assert await service.select_api_key() is True

    provider.rotate.assert_called_once_with("new-key")
    assert selector.opened == 1
    assert service.key_selected is True


@pytest.mark.asyncio
async def test_select_without_returned_key_keeps_client(provider) -> None:
    service = _service(provider, FakeKeySelector(key=None))

    assert await service.select_api_key() is True

    provider.rotate.assert_not_called()
    assert service.key_selected is True


@pytest.mark.asyncio
async def test_invalidate_requires_new_selection(provider) -> None:
    selector = FakeKeySelector(selected=True)
    service = _service(provider, selector)
    await service.ensure_api_key()

    service.invalidate()
    selector.selected = False

    assert service.key_selected is False
    assert await service.ensure_api_key() is False


@pytest.mark.asyncio
async def test_configured_key_counts_as_selected(monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    provider = GenAIClientProvider(
        "configured-key", logging.getLogger("CredentialServiceTest")
    )
    service = _service(provider, TerminalKeySelector())

    assert await service.ensure_api_key() is True
    assert service.key_selected is True


@pytest.mark.asyncio
async def test_configured_key_skips_selector() -> None:
    provider = MagicMock(has_api_key=True, api_key="configured-key")
    selector = SimpleNamespace(
        has_selected_api_key=AsyncMock(return_value=False),
        open_select_key=AsyncMock(),
    )
    service = _service(provider, selector)

    assert await service.ensure_api_key() is True
    selector.has_selected_api_key.assert_not_awaited()


@pytest.mark.asyncio
async def test_rejected_configured_key_needs_new_selection() -> None:
    provider = GenAIClientProvider(
        "rejected-key", logging.getLogger("CredentialServiceTest")
    )
    selector = FakeKeySelector(selected=False, key="fresh-key")
    service = _service(provider, selector)
    assert await service.ensure_api_key() is True

    service.invalidate()

    assert await service.ensure_api_key() is False
    assert await service.select_api_key() is True
    assert provider.api_key == "fresh-key"
    service.invalidate()
    selector.selected = False
    assert await service.ensure_api_key() is False
