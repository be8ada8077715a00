"""Domain events emitted while reconciling recurring payments.

The reconciler reports everything it does as events delivered through a
listener port. Authorization is not an event: it is a separate question the
reconciler asks and waits on.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import SkipReason
from .models import Contract, PaymentRequest
from .value_objects import SubscriptionKey


class ReconcileEvent(BaseModel):
    """Base class for reconciliation events.

    Events are immutable facts about one polling cycle.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,  # Errors and acknowledgement handles
        extra="forbid",
        frozen=True,
    )

    event_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique event identifier",
    )
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the event occurred; the reconciler stamps its cycle time",
    )
    event_type: str = Field(..., description="Type of the event")


class PaymentAcknowledged(ReconcileEvent):
    """Emitted after a payment was handed to the merchant.

    ``ack`` is the awaitable acknowledgement returned by the payment session;
    it is forwarded unresolved.
    """

    subscription: SubscriptionKey
    contract_id: bytes
    amount: int
    payment_request: PaymentRequest
    ack: Any = Field(default=None, description="Awaitable merchant acknowledgement")

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "PaymentAcknowledged"
        super().__init__(**data)


class ChargeSkipped(ReconcileEvent):
    """Emitted when a polled contract produced no payment."""

    subscription: SubscriptionKey
    contract_id: bytes
    reason: SkipReason
    amount: int = 0

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "ChargeSkipped"
        super().__init__(**data)


class ContractFailed(ReconcileEvent):
    """Emitted when processing one contract raised.

    The failure is isolated to that contract; the cycle carries on.
    """

    error: Exception
    subscription: SubscriptionKey | None = None
    contract: Contract | None = None

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "ContractFailed"
        super().__init__(**data)


class CycleAborted(ReconcileEvent):
    """Emitted when the store could not be loaded; nothing was processed."""

    error: Exception

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "CycleAborted"
        super().__init__(**data)


class CycleCompleted(ReconcileEvent):
    """Emitted once at the end of every cycle, aborted or not."""

    paid_count: int = Field(..., ge=0)
    aborted: bool = False

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "CycleCompleted"
        super().__init__(**data)
