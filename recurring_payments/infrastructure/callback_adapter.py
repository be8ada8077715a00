"""Adapter exposing a wide ReconcileCallback as the reconciler's two ports."""

from ..domain.events import (
    ContractFailed,
    CycleAborted,
    CycleCompleted,
    PaymentAcknowledged,
    ReconcileEvent,
)
from ..domain.models import ChargeAuthorizationRequest
from ..ports.reconcile_callback import (
    ChargeAuthorizerPort,
    ReconcileCallback,
    ReconcileListenerPort,
)


class CallbackAdapter(ChargeAuthorizerPort, ReconcileListenerPort):
    """Route authorization and events to the matching callback hook.

    Skipped charges have no hook and are dropped.
    """

    def __init__(self, callback: ReconcileCallback):
        self._callback = callback

    async def authorize(self, request: ChargeAuthorizationRequest) -> bool:
        """Ask the callback's authorize hook."""
        return bool(
            self._callback.authorize(
                request.payment_request,
                request.max_amount_per_charge,
                request.period_type,
                request.max_amount_per_period,
                request.new_amount,
                request.paid_this_period,
            )
        )

    async def publish(self, event: ReconcileEvent) -> None:
        """Dispatch one event to its hook."""
        if isinstance(event, PaymentAcknowledged):
            self._callback.on_acknowledged(event.payment_request, event.ack)
        elif isinstance(event, ContractFailed):
            self._callback.on_error(event.error, event.subscription, event.contract)
        elif isinstance(event, CycleAborted):
            self._callback.on_error(event.error, None, None)
        elif isinstance(event, CycleCompleted):
            self._callback.on_cycle_complete(event.paid_count)
