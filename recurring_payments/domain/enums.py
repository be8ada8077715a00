"""Domain enums for type safety and consistency.

This module centralizes all enumeration types used across the package,
ensuring type safety and preventing string literal errors.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum


class PeriodType(str, Enum):
    """Billing period of a recurring payment contract.

    Caps such as the maximum amount per period are evaluated against the
    calendar period (in UTC) that contains the moment of the charge.
    """

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"  # Periods start on Monday
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUAL = "ANNUAL"

    def period_start(self, now: datetime) -> datetime:
        """Return the start of the calendar period containing ``now``.

        Args:
            now: A timezone-aware instant

        Returns:
            The first instant of the period, in UTC

        Raises:
            ValueError: If ``now`` is naive
        """
        if now.tzinfo is None:
            raise ValueError("Period computation requires a timezone-aware datetime")

        day = now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
        if self is PeriodType.DAILY:
            return day
        if self is PeriodType.WEEKLY:
            return day - timedelta(days=day.weekday())
        if self is PeriodType.MONTHLY:
            return day.replace(day=1)
        if self is PeriodType.QUARTERLY:
            first_month = 3 * ((day.month - 1) // 3) + 1
            return day.replace(month=first_month, day=1)
        return day.replace(month=1, day=1)


class SkipReason(str, Enum):
    """Why a polled contract produced no payment."""

    NO_CHARGE = "no_charge"  # Merchant requested nothing (amount <= 0)
    RECURRING_TERMS_IN_REFRESH = "recurring_terms_in_refresh"  # Protocol violation
    POLICY_REJECTED = "policy_rejected"  # Authorizer declined the charge
