"""System clock implementation using Python's datetime."""

from datetime import UTC, datetime

from ..ports.clock import ClockPort


class SystemClock(ClockPort):
    """Default clock returning the current time in UTC."""

    def now(self) -> datetime:
        """Get the current UTC time."""
        return datetime.now(UTC)


class FixedClock(ClockPort):
    """Clock frozen at a given instant, moved only explicitly.

    Used to drive contract windows and billing periods deterministically.
    """

    def __init__(self, now: datetime):
        if now.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._now = now

    def now(self) -> datetime:
        """Return the frozen instant."""
        return self._now

    def set(self, now: datetime) -> None:
        """Move the clock to ``now``."""
        if now.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._now = now
