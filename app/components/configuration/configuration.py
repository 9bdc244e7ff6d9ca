"""
Settings loaded from environment variables and ``.env`` files.

Priority, highest first:

1. Environment variables
2. ``<config_path>/.<env>.env`` (e.g. ``configuration/.production.env``)
3. ``<config_path>/.env``
4. Defaults declared on StudioSettings
"""

import os
from typing import Any, TypeVar

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.components.configuration.configuration_interface import (
    ConfigurationInterface,
)

T = TypeVar("T")


class StudioSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "GOOGLE_API_KEY"),
    )
    http_timeout_ms: int = 300_000

    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    tracing_enabled: bool = True

    max_upload_bytes: int = 20 * 1024 * 1024

    image_model_name: str = "gemini-2.5-flash-image"

    video_model_name: str = "veo-3.1-fast-generate-preview"
    video_resolution: str = "720p"
    video_poll_interval_seconds: float = 10.0
    # 0 disables the limit.
    video_poll_timeout_seconds: float = 900.0
    video_status_check_attempts: int = 1
    video_download_timeout_seconds: float = 120.0
    video_output_dir: str | None = None

    model_name: str = "gemini-2.5-flash"
    model_name_pro: str = "gemini-2.5-pro"


def _build_env_files(config_path: str, env: str) -> tuple[str, ...]:
    # Later files override earlier ones; missing files are skipped.
    return (
        os.path.join(config_path, ".env"),
        os.path.join(config_path, f".{env}.env"),
    )


class Configuration(ConfigurationInterface):
    def __init__(self, env: str, config_path: str) -> None:
        self.__env = env
        self.__settings = StudioSettings(_env_file=_build_env_files(config_path, env))

    def get_configuration(
        self, key: str, value_type: type[T], default: Any = None
    ) -> T:
        value = getattr(self.__settings, key.lower(), None)
        if value is None or value == "":
            return default

        if isinstance(value, value_type):
            return value

        try:
            return value_type(value)  # type: ignore[call-arg]
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"Configuration value for {key} cannot be read as {value_type.__name__}: {value!r}"
            ) from e

    def get_environment(self) -> str:
        return self.__env
