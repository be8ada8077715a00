"""Logger implementation over Python's standard logging."""

import logging
from typing import Any

from ..ports.logger import LoggerPort


def format_context(message: str, context: dict[str, Any]) -> str:
    """Append ``key=value`` pairs to a message, skipping empty values."""
    pairs = " ".join(f"{key}={value}" for key, value in context.items() if value is not None)
    return f"{message} [{pairs}]" if pairs else message


class SimpleLogger(LoggerPort):
    """Logger implementation using Python's standard logging.

    Keyword context is both rendered into the message, so it shows up with
    the default formatter, and attached to the record through ``extra`` for
    structured handlers configured by the host.
    """

    def __init__(self, name: str = "recurring_payments", level: int = logging.INFO):
        """Initialize the logger.

        Args:
            name: Logger name (default: "recurring_payments")
            level: Logging level (default: INFO)
        """
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def _log(self, level: int, message: str, context: dict[str, Any], **options: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, format_context(message, context), extra=context, **options)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """Log an error with the traceback of ``exc_info`` (or the one being handled)."""
        self._log(logging.ERROR, message, kwargs, exc_info=exc_info or True)
