"""Clock port abstraction for time handling.

Contract activity, cancellation and period windows all depend on "now".
Reading it through this port keeps those rules deterministic under test.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class ClockPort(ABC):
    """Abstract clock interface for time operations."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time as a timezone-aware datetime.

        Note:
            Implementations MUST return timezone-aware datetimes.
            Contract windows are compared against this value directly.
        """
        ...
