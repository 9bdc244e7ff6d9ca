import os
from pathlib import Path
from threading import Lock
from typing import Any, TypeVar, cast

import httpx
from dotenv import load_dotenv
from openinference.instrumentation.google_genai import GoogleGenAIInstrumentor

from app.components.configuration.configuration import Configuration
from app.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from app.components.genai.genai_client_provider import GenAIClientProvider
from app.components.logger.logger import Logger
from app.components.logger.logger_interface import LoggerInterface


load_dotenv()


def _is_test_environment() -> bool:
    """
    Check if we are running in a test environment.

    Returns:
        True if running under pytest or if TESTING env var is set, False otherwise.
    """
    import sys

    if any("pytest" in arg for arg in sys.argv):
        return True

    if os.getenv("TESTING", "").lower() in ("true", "1", "yes"):
        return True

    return False


def _validate_otel_env_vars() -> None:
    """
    Validate OpenTelemetry/Langfuse environment variables for instrumentation.

    Two configuration paths are supported:

    1.  **Langfuse Native Integration:** If `LANGFUSE_PUBLIC_KEY`, `LANGFUSE_SECRET_KEY`,
        and `LANGFUSE_BASE_URL` are all set, validation is skipped.

    2.  **Manual OpenTelemetry Configuration:** Otherwise `OTEL_EXPORTER_OTLP_ENDPOINT`
        and `OTEL_EXPORTER_OTLP_HEADERS` must both be set for OTLP export.

    Raises:
        RuntimeError: If neither configuration path is complete. Set
                      TRACING_ENABLED=false to run without tracing.
    """

    otel_endpoint: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "").strip()
    otel_headers: str = os.getenv("OTEL_EXPORTER_OTLP_HEADERS", "").strip()

    langfuse_public_key: str = os.getenv("LANGFUSE_PUBLIC_KEY", "").strip()
    langfuse_secret_key: str = os.getenv("LANGFUSE_SECRET_KEY", "").strip()
    langfuse_base_url: str = os.getenv("LANGFUSE_BASE_URL", "").strip()

    if langfuse_public_key and langfuse_secret_key and langfuse_base_url:
        return

    if not otel_endpoint:
        raise RuntimeError(
            "OTEL_EXPORTER_OTLP_ENDPOINT environment variable is not set or is empty. "
            "Please set it to a valid OTLP endpoint URL, or set TRACING_ENABLED=false."
        )

    if not otel_headers:
        raise RuntimeError(
            "OTEL_EXPORTER_OTLP_HEADERS environment variable is not set or is empty, "
            "and LANGFUSE_PUBLIC_KEY/LANGFUSE_SECRET_KEY/LANGFUSE_BASE_URL are not all available. "
            "Please set either OTEL_EXPORTER_OTLP_HEADERS directly (e.g., 'Authorization=Basic <base64_credentials>') "
            "or provide the Langfuse keys."
        )


_instrumentation_lock: Lock = Lock()
_instrumented: bool = False


def _configure_tracing(configuration: ConfigurationInterface) -> None:
    """
    Instrument the Gen AI SDK once per process.

    Skipped in the test environment and when TRACING_ENABLED is false in
    any configuration layer (process env, configuration/.env or
    configuration/.<env>.env).
    """
    global _instrumented

    if _is_test_environment():
        return

    if not configuration.get_configuration("TRACING_ENABLED", bool, default=True):
        return

    with _instrumentation_lock:
        if _instrumented:
            return

        _validate_otel_env_vars()
        GoogleGenAIInstrumentor().instrument()
        _instrumented = True


T = TypeVar("T")


class ComponentsMeta(type):
    _instances: dict[tuple[type, str], "Components"] = {}
    _lock: Lock = Lock()

    def __call__(cls, *args, **kwargs):
        env = args[0] if args else kwargs.get("env")
        if env is None:
            raise ValueError("Environment must be provided")

        env_key = str(env)
        key = (cls, env_key)
        with cls._lock:
            if key not in cls._instances:
                instance = super().__call__(*args, **kwargs)
                cls._instances[key] = instance
        return cls._instances[key]


class Components(metaclass=ComponentsMeta):
    def __init__(self, env: str, config_path: str) -> None:
        self.__env: str = env
        root_dir: str = str(Path(__file__).resolve().parents[2])
        self.__config_path: str = os.path.join(root_dir, config_path)
        self.__components: dict[type[Any], Any] = self.__bootstrap_components()

    def __bootstrap_components(self) -> dict[type[Any], Any]:
        if self.__env in {"development", "staging", "production"}:
            return self.__get_dev_components()

        raise ValueError(f"Invalid environment: {self.__env}")

    def __get_dev_components(self) -> dict[type[Any], Any]:
        configuration: ConfigurationInterface = Configuration(
            self.__env, self.__config_path
        )
        _configure_tracing(configuration)

        logger: LoggerInterface = Logger(
            log_format=configuration.get_configuration("LOG_FORMAT", str),
            log_level=configuration.get_configuration("LOG_LEVEL", str, default="INFO"),
        )

        client_provider = GenAIClientProvider(
            api_key=configuration.get_configuration("GEMINI_API_KEY", str),
            logger=logger.get_logger("GenAIClientProvider"),
            timeout_ms=configuration.get_configuration(
                "HTTP_TIMEOUT_MS", int, default=300_000
            ),
        )

        # Shared by every download; closed by Studio.close().
        http_client = httpx.AsyncClient(
            timeout=configuration.get_configuration(
                "VIDEO_DOWNLOAD_TIMEOUT_SECONDS", float, default=120.0
            )
        )

        components: dict[type[Any], Any] = {
            ConfigurationInterface: configuration,
            LoggerInterface: logger,
            GenAIClientProvider: client_provider,
            httpx.AsyncClient: http_client,
        }

        return components

    def get_component(self, component_name: type[T]) -> T:
        if component_name not in self.__components:
            raise ValueError(f"Component {component_name} not found")

        return cast(T, self.__components[component_name])

    def get_config_path(self) -> str:
        return self.__config_path
