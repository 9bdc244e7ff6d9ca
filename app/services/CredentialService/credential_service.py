import logging

from app.components.genai.genai_client_provider import GenAIClientProvider
from app.services.CredentialService.credential_service_interface import (
    CredentialServiceInterface,
    KeySelectorProtocol,
)


class CredentialService(CredentialServiceInterface):
    def __init__(
        self,
        client_provider: GenAIClientProvider,
        logger: logging.Logger,
        key_selector: KeySelectorProtocol | None = None,
    ) -> None:
        self.client_provider = client_provider
        self.logger = logger
        self.key_selector = key_selector
        self._key_selected = False
        self._rejected_key: str | None = None

    @property
    def key_selected(self) -> bool:
        return self._key_selected

    async def ensure_api_key(self) -> bool:
        if self._key_selected:
            return True

        provider_key = self.client_provider.api_key
        if self.client_provider.has_api_key and provider_key != self._rejected_key:
            self.logger.info("Using the configured API key")
            self._key_selected = True
            return True

        if self.key_selector is None:
            # No host integration: credentials are expected out-of-band.
            self.logger.warning(
                "No key selector available. Assuming the API key is set via environment variables."
            )
            self._key_selected = True
            return True

        if await self.key_selector.has_selected_api_key():
            self._key_selected = True
            return True

        self.logger.info("No API key selected yet")
        return False

    async def select_api_key(self) -> bool:
        if self.key_selector is None:
            return await self.ensure_api_key()

        api_key = await self.key_selector.open_select_key()
        if api_key:
            self.client_provider.rotate(api_key)

        # Selection is assumed to have succeeded; a bad key surfaces later
        # as an auth error and triggers invalidate().
        self._key_selected = True
        self.logger.info("API key selection completed")
        return True

    def invalidate(self) -> None:
        """Drop the current key; it is not accepted again until a new one is selected."""
        if self._key_selected:
            self.logger.warning("API key invalidated, re-selection required")
        self._key_selected = False
        self._rejected_key = self.client_provider.api_key
