"""Logger port used by the store and the reconciler.

Messages are short and human readable; everything needed to correlate them
travels as keyword context. The keys in use are ``subscription`` (printable
key ``merchant/hex``), ``contract_id`` (hex), ``cycle_id``, ``operation``
(``load``, ``persist``), ``component``, ``error_code`` and ``error_type``.
"""

from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Sink for store and reconciliation log lines.

    Implementations must accept arbitrary keyword context and must not raise
    because of it.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Per-contract detail such as skipped charges and recorded payments."""
        ...

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Stored subscriptions, sent payments and finished cycles."""
        ...

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Store read or persist failures."""
        ...

    @abstractmethod
    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """Log ``exc_info`` with its traceback.

        Without ``exc_info`` the exception currently being handled is used.
        """
        ...
