"""
Process-wide Google Gen AI client.

The client is built once from the configured key and handed to every
service through this provider. Credential rotation goes through rotate(),
which replaces the client for all subsequent calls.
"""

from __future__ import annotations

import logging
from threading import Lock

from google import genai
from google.genai import types

from app.entities.errors import ErrorKind, UpstreamError


class GenAIClientProvider:
    def __init__(
        self,
        api_key: str | None,
        logger: logging.Logger,
        timeout_ms: int = 300_000,
    ) -> None:
        self.logger = logger
        self.timeout_ms = timeout_ms
        self._api_key: str | None = api_key or None
        self._client: genai.Client | None = None
        self._lock = Lock()

    @property
    def api_key(self) -> str | None:
        return self._api_key

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    @property
    def client(self) -> genai.Client:
        with self._lock:
            if self._client is None:
                self._client = self._build_client(self._api_key)
            return self._client

    def rotate(self, api_key: str) -> None:
        """Replace the credential and rebuild the client."""
        if not api_key or not api_key.strip():
            raise ValueError("API key must not be empty")

        with self._lock:
            self._api_key = api_key.strip()
            self._client = self._build_client(self._api_key)
        self.logger.info("Gen AI client re-initialized with a new API key")

    def _build_client(self, api_key: str | None) -> genai.Client:
        self.logger.info(
            "Initializing Gen AI client (key configured: %s, timeout: %sms)",
            bool(api_key),
            self.timeout_ms,
        )
        # Without an explicit key the SDK falls back to GEMINI_API_KEY/GOOGLE_API_KEY.
        try:
            return genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=self.timeout_ms),
            )
        except ValueError as e:
            raise UpstreamError(
                f"Gen AI client could not be created: {e}",
                kind=ErrorKind.AUTH_INVALID,
            ) from e
