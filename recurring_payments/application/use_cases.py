"""Application use cases following hexagonal architecture principles.

This module contains the application services that orchestrate recurring
payments by coordinating the domain with the store, payment session,
authorizer and listener ports.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..domain.aggregates import Subscription
from ..domain.enums import SkipReason
from ..domain.events import (
    ChargeSkipped,
    ContractFailed,
    CycleAborted,
    CycleCompleted,
    PaymentAcknowledged,
    ReconcileEvent,
)
from ..domain.exceptions import ChargeFetchError, PaymentSendError, RecurringPaymentError
from ..domain.models import (
    ChargeAuthorizationRequest,
    ChargeQuote,
    Contract,
    ContractBundle,
    PaymentRecord,
)
from ..domain.value_objects import SubscriptionKey, contract_label
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.metrics import MetricsPort
from ..ports.payment_session import PaymentSessionPort
from ..ports.reconcile_callback import ChargeAuthorizerPort, ReconcileListenerPort
from ..ports.subscription_store import SubscriptionStorePort
from .dtos import CycleReport


class IngestContractUseCase:
    """Use case storing recurring terms received at subscription sign-up.

    Bundles without recurring terms are ignored. Store errors propagate to
    the caller: ingestion is a single request, not a cycle.
    """

    def __init__(self, store: SubscriptionStorePort, logger: LoggerPort | None = None):
        """Initialize the use case with required dependencies."""
        self._store = store
        self._logger = logger

    async def execute(self, bundle: ContractBundle) -> Subscription | None:
        """Store ``bundle`` if it carries recurring terms.

        Returns:
            The persisted subscription, or None when nothing was stored
        """
        if not bundle.has_recurring_terms:
            if self._logger:
                self._logger.debug(
                    "Bundle has no recurring terms, nothing to store",
                    subscription=str(bundle.key),
                )
            return None

        subscription = self._store.merge_and_persist(bundle.key, bundle.contracts)
        if self._logger:
            self._logger.info(
                f"Stored recurring terms with {len(subscription.contracts)} contracts",
                subscription=str(bundle.key),
            )
        return subscription


@dataclass
class _CycleState:
    """Mutable bookkeeping of one running cycle."""

    cycle_id: str
    now: datetime
    paid_count: int = 0
    events: list[ReconcileEvent] = field(default_factory=list)


class ReconcileCycleUseCase:
    """Use case running one polling cycle over every active contract.

    For each active contract the merchant is asked for a fresh charge, the
    authorizer decides on it, and approved charges are paid and recorded.
    Failures are isolated per contract. The cycle itself never raises for
    store, collaborator or listener errors.

    A single cycle must be in flight per store at a time; this use case does
    not lock the store.
    """

    def __init__(
        self,
        store: SubscriptionStorePort,
        payment_session: PaymentSessionPort,
        authorizer: ChargeAuthorizerPort,
        listener: ReconcileListenerPort,
        clock: ClockPort,
        metrics: MetricsPort | None = None,
        logger: LoggerPort | None = None,
        verify_identity: bool = True,
        period_scoped_totals: bool = True,
    ):
        """Initialize the use case with required dependencies.

        Args:
            store: Subscription store
            payment_session: Merchant payment protocol
            authorizer: Policy deciding on each charge
            listener: Receiver of cycle events
            clock: Time source, read once per cycle
            metrics: Optional metrics collector
            logger: Optional logger
            verify_identity: Whether merchants must prove their identity
            period_scoped_totals: Sum only the current calendar period when
                reporting what a contract already paid; otherwise sum its
                whole history
        """
        self._store = store
        self._payment_session = payment_session
        self._authorizer = authorizer
        self._listener = listener
        self._clock = clock
        self._metrics = metrics
        self._logger = logger
        self._verify_identity = verify_identity
        self._period_scoped_totals = period_scoped_totals

    async def execute(self) -> CycleReport:
        """Run one cycle to completion."""
        state = _CycleState(cycle_id=str(uuid.uuid4()), now=self._clock.now())
        self._increment("reconcile.cycles")

        if self._metrics:
            with self._metrics.timer("reconcile.cycle_ms"):
                aborted = await self._run(state)
        else:
            aborted = await self._run(state)

        await self._publish(state, CycleCompleted(paid_count=state.paid_count, aborted=aborted))
        if self._logger:
            self._logger.info(
                f"Reconciliation cycle finished, {state.paid_count} payments sent",
                cycle_id=state.cycle_id,
            )

        return CycleReport(
            cycle_id=state.cycle_id,
            paid_count=state.paid_count,
            aborted=aborted,
            events=tuple(state.events),
            started_at=state.now,
            finished_at=self._clock.now(),
        )

    async def _run(self, state: _CycleState) -> bool:
        """Process every active contract; return True if the cycle aborted."""
        try:
            snapshot = self._store.load()
        except Exception as e:
            self._increment("reconcile.cycles.aborted")
            if self._logger:
                self._logger.exception(
                    "Cannot load subscription store, aborting cycle",
                    exc_info=e,
                    cycle_id=state.cycle_id,
                )
            await self._publish(state, CycleAborted(error=e))
            return True

        if self._metrics:
            self._metrics.gauge("reconcile.subscriptions", len(snapshot))
        for subscription in snapshot.all_subscriptions():
            for contract in subscription.active_contracts(state.now):
                try:
                    await self._reconcile_contract(state, subscription, contract)
                except Exception as e:
                    await self._report_contract_failure(state, subscription.key, contract, e)
        return False

    async def _reconcile_contract(
        self, state: _CycleState, subscription: Subscription, contract: Contract
    ) -> None:
        """Run one charge attempt for an active contract."""
        key = subscription.key
        self._increment("reconcile.contracts.polled")

        quote = await self._fetch_charge(contract)

        if quote.amount <= 0:
            await self._skip(state, key, contract, SkipReason.NO_CHARGE, quote.amount)
            return
        if quote.has_recurring_terms:
            # Recurring terms belong in the initial contract only
            await self._skip(
                state, key, contract, SkipReason.RECURRING_TERMS_IN_REFRESH, quote.amount
            )
            return

        request = self._build_authorization_request(state, subscription, contract, quote)
        if not await self._authorizer.authorize(request):
            self._increment("reconcile.charges.rejected")
            await self._skip(state, key, contract, SkipReason.POLICY_REJECTED, quote.amount)
            return

        ack = await self._send_payment(contract, quote)
        state.paid_count += 1
        self._increment("reconcile.payments.sent")
        await self._publish(
            state,
            PaymentAcknowledged(
                subscription=key,
                contract_id=contract.contract_id,
                amount=quote.amount,
                payment_request=quote.payment_request,
                ack=ack,
            ),
        )

        record = PaymentRecord.from_quote(contract.contract_id, quote, state.now)
        self._store.append_payment_record(key, record)
        if self._logger:
            self._logger.info(
                f"Paid {quote.amount}",
                cycle_id=state.cycle_id,
                subscription=str(key),
                contract_id=contract_label(contract.contract_id),
            )

    def _build_authorization_request(
        self,
        state: _CycleState,
        subscription: Subscription,
        contract: Contract,
        quote: ChargeQuote,
    ) -> ChargeAuthorizationRequest:
        """Gather the contract limits and what the contract already consumed."""
        if self._period_scoped_totals:
            period_start: datetime | None = contract.period_type.period_start(state.now)
            period_end: datetime | None = state.now
        else:
            period_start = period_end = None

        paid_this_period = subscription.amount_paid_in_period(
            contract.contract_id, period_start, period_end
        )
        return ChargeAuthorizationRequest(
            subscription=subscription.key,
            contract=contract,
            quote=quote,
            max_amount_per_charge=contract.max_amount_per_charge,
            period_type=contract.period_type,
            max_amount_per_period=contract.max_amount_per_period,
            new_amount=quote.amount,
            paid_this_period=paid_this_period,
            period_start=period_start,
            period_end=period_end,
        )

    async def _fetch_charge(self, contract: Contract) -> ChargeQuote:
        try:
            return await self._payment_session.fetch_current_charge(
                contract.polling_url, self._verify_identity
            )
        except RecurringPaymentError:
            raise
        except Exception as e:
            raise ChargeFetchError(
                f"Failed to fetch charge: {e}", polling_url=contract.polling_url
            ) from e

    async def _send_payment(self, contract: Contract, quote: ChargeQuote) -> Awaitable[Any]:
        try:
            return await self._payment_session.send_payment(quote)
        except RecurringPaymentError:
            raise
        except Exception as e:
            raise PaymentSendError(
                f"Failed to send payment: {e}", polling_url=contract.polling_url
            ) from e

    async def _skip(
        self,
        state: _CycleState,
        key: SubscriptionKey,
        contract: Contract,
        reason: SkipReason,
        amount: int,
    ) -> None:
        self._increment(f"reconcile.charges.skipped.{reason.value}")
        if self._logger:
            self._logger.debug(
                f"Skipping charge: {reason.value}",
                cycle_id=state.cycle_id,
                subscription=str(key),
                contract_id=contract_label(contract.contract_id),
            )
        await self._publish(
            state,
            ChargeSkipped(
                subscription=key,
                contract_id=contract.contract_id,
                reason=reason,
                amount=amount,
            ),
        )

    async def _report_contract_failure(
        self,
        state: _CycleState,
        key: SubscriptionKey,
        contract: Contract,
        error: Exception,
    ) -> None:
        self._increment("reconcile.contracts.failed")
        if self._logger:
            self._logger.exception(
                "Failed to reconcile contract",
                exc_info=error,
                cycle_id=state.cycle_id,
                subscription=str(key),
                contract_id=contract_label(contract.contract_id),
            )
        await self._publish(state, ContractFailed(error=error, subscription=key, contract=contract))

    async def _publish(self, state: _CycleState, event: ReconcileEvent) -> None:
        """Record ``event`` and hand it to the listener.

        Events are stamped with the cycle's ``now``, like the payment records.
        A listener that raises is logged and otherwise ignored, so it can
        neither abort the cycle nor turn a report into a contract failure.
        """
        event = event.model_copy(update={"occurred_at": state.now})
        state.events.append(event)
        try:
            await self._listener.publish(event)
        except Exception as e:
            if self._logger:
                self._logger.exception(
                    f"Listener failed to handle {event.event_type}",
                    exc_info=e,
                    cycle_id=state.cycle_id,
                )

    def _increment(self, name: str) -> None:
        if self._metrics:
            self._metrics.increment(name)
