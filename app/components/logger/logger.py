import logging

from app.components.logger.logger_interface import LoggerInterface


ROOT_LOGGER_NAME = "studio"


class Logger(LoggerInterface):
    def __init__(self, log_format: str, log_level: str) -> None:
        level = logging.getLevelName(str(log_level).upper())
        self.level: int = level if isinstance(level, int) else logging.INFO

        self._root = logging.getLogger(ROOT_LOGGER_NAME)
        self._root.setLevel(self.level)

        if not any(
            getattr(handler, "_studio_handler", False) for handler in self._root.handlers
        ):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(log_format))
            handler._studio_handler = True  # type: ignore[attr-defined]
            self._root.addHandler(handler)

    def get_logger(self, name: str) -> logging.Logger:
        return self._root.getChild(name)
