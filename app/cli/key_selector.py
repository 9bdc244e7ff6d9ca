import asyncio
import getpass
import os


class TerminalKeySelector:
    """Asks for an API key on the terminal when none is configured."""

    def __init__(self, env_var: str = "GEMINI_API_KEY") -> None:
        self.env_var = env_var

    async def has_selected_api_key(self) -> bool:
        return bool(os.getenv(self.env_var, "").strip())

    async def open_select_key(self) -> str | None:
        key = await asyncio.to_thread(getpass.getpass, "Enter your Gemini API key: ")
        return key.strip() or None
