"""Data Transfer Objects returned by the application use cases."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..domain.events import (
    ChargeSkipped,
    ContractFailed,
    CycleAborted,
    PaymentAcknowledged,
    ReconcileEvent,
)


class CycleReport(BaseModel):
    """Outcome of one reconciliation cycle.

    ``events`` holds every event published during the cycle, in order, so a
    host can inspect the cycle without registering a listener.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    cycle_id: str = Field(..., description="Identifier of the cycle")
    paid_count: int = Field(..., ge=0, description="Payments sent during the cycle")
    aborted: bool = Field(default=False, description="True when the store could not be loaded")
    events: tuple[ReconcileEvent, ...] = Field(default_factory=tuple)
    started_at: datetime
    finished_at: datetime

    @property
    def error(self) -> Exception | None:
        """The error that aborted the cycle, if any."""
        for event in self.events:
            if isinstance(event, CycleAborted):
                return event.error
        return None

    @property
    def acknowledgements(self) -> list[PaymentAcknowledged]:
        """Payments sent during the cycle."""
        return [event for event in self.events if isinstance(event, PaymentAcknowledged)]

    @property
    def skipped(self) -> list[ChargeSkipped]:
        """Contracts polled without a payment."""
        return [event for event in self.events if isinstance(event, ChargeSkipped)]

    @property
    def failures(self) -> list[ContractFailed]:
        """Contracts whose processing raised."""
        return [event for event in self.events if isinstance(event, ContractFailed)]
