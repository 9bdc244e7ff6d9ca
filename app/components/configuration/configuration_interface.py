from abc import ABC, abstractmethod
from typing import Any, TypeVar

T = TypeVar("T")


class ConfigurationInterface(ABC):
    @abstractmethod
    def get_configuration(
        self, key: str, value_type: type[T], default: Any = None
    ) -> T:
        """Return the configured value for ``key`` cast to ``value_type``."""

    @abstractmethod
    def get_environment(self) -> str:
        pass
