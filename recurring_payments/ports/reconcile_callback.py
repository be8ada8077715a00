"""Ports through which the host takes part in a reconciliation cycle.

Authorization and notification are separate ports. The authorizer answers a
question and the cycle waits for its answer; the listener only receives
events and its return value is never used.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any

from ..domain.enums import PeriodType
from ..domain.events import ReconcileEvent
from ..domain.models import ChargeAuthorizationRequest, Contract, PaymentRequest
from ..domain.value_objects import SubscriptionKey


class ChargeAuthorizerPort(ABC):
    """Policy hook approving or denying each charge.

    The reconciler never compares amounts against the contract caps itself.
    It supplies every figure needed and enforcement belongs to the
    authorizer, which may allow controlled overage or partial payment.
    """

    @abstractmethod
    async def authorize(self, request: ChargeAuthorizationRequest) -> bool:
        """Return True to pay the charge, False to skip it."""
        ...


class ReconcileListenerPort(ABC):
    """Receiver of acknowledgements, errors and cycle completion."""

    @abstractmethod
    async def publish(self, event: ReconcileEvent) -> None:
        """Deliver one event; events arrive in the order they happened."""
        ...


class ReconcileCallback(ABC):
    """Single wide callback with one hook per outcome.

    For hosts that prefer plain synchronous methods over events; wrap it in
    ``CallbackAdapter`` to obtain both ports.
    """

    @abstractmethod
    def authorize(
        self,
        payment_request: PaymentRequest,
        max_amount_per_charge: int,
        period_type: PeriodType,
        max_amount_per_period: int,
        new_amount: int,
        paid_this_period: int,
    ) -> bool:
        """Validate the charge against the contract and return True to pay it."""
        ...

    @abstractmethod
    def on_acknowledged(self, payment_request: PaymentRequest, ack: Awaitable[Any]) -> None:
        """Called after a payment was handed to the merchant."""
        ...

    @abstractmethod
    def on_error(
        self,
        error: Exception,
        subscription: SubscriptionKey | None,
        contract: Contract | None,
    ) -> None:
        """Called for every failure; context is None when the whole cycle failed."""
        ...

    @abstractmethod
    def on_cycle_complete(self, paid_count: int) -> None:
        """Called once at the end of every cycle with the number of payments sent."""
        ...
