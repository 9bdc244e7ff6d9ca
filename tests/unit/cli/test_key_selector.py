import pytest

from app.cli.key_selector import TerminalKeySelector
from app.services.CredentialService.credential_service_interface import (
    KeySelectorProtocol,
)


def test_satisfies_key_selector_protocol() -> None:
    assert isinstance(TerminalKeySelector(), KeySelectorProtocol)


@pytest.mark.asyncio
async def test_key_from_environment_counts_as_selected(monkeypatch) -> None:
    monkeypatch.setenv("STUDIO_TEST_KEY", "abc")

    assert await TerminalKeySelector("STUDIO_TEST_KEY").has_selected_api_key() is True


@pytest.mark.asyncio
async def test_blank_environment_key_is_not_selected(monkeypatch) -> None:
    monkeypatch.setenv("STUDIO_TEST_KEY", "   ")

    assert await TerminalKeySelector("STUDIO_TEST_KEY").has_selected_api_key() is False


@pytest.mark.asyncio
async def test_prompted_key_is_stripped(monkeypatch) -> None:
    monkeypatch.setattr("getpass.getpass", lambda prompt: "  typed-key \n")

    assert await TerminalKeySelector().open_select_key() == "typed-key"


@pytest.mark.asyncio
async def test_empty_prompt_returns_none(monkeypatch) -> None:
    monkeypatch.setattr("getpass.getpass", lambda prompt: "")

    assert await TerminalKeySelector().open_select_key() is None
