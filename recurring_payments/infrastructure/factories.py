"""Concrete factories wiring the application use cases.

Hosts describe what they want with configuration objects and hand over the
collaborators that live outside this package (the payment session and the
policy hooks); the factory returns ready-to-run use cases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .callback_adapter import CallbackAdapter
from .config import ReconcilerConfig, StoreConfig
from .file_subscription_store import FileSubscriptionStore
from .system_clock import SystemClock

if TYPE_CHECKING:
    from ..application.use_cases import IngestContractUseCase, ReconcileCycleUseCase
    from ..ports.clock import ClockPort
    from ..ports.logger import LoggerPort
    from ..ports.metrics import MetricsPort
    from ..ports.payment_session import PaymentSessionPort
    from ..ports.reconcile_callback import (
        ChargeAuthorizerPort,
        ReconcileCallback,
        ReconcileListenerPort,
    )
    from ..ports.subscription_store import SubscriptionStorePort


class DefaultUseCaseFactory:
    """Default wiring of the store and use cases.

    One factory shares a single clock between the store and the reconciler,
    so the cancellation rule applied on merge and the activity check applied
    by the cycle read the same time source.
    """

    def __init__(
        self,
        clock: ClockPort | None = None,
        metrics: MetricsPort | None = None,
        logger: LoggerPort | None = None,
    ):
        """Initialize the factory.

        Args:
            clock: Time source shared by everything the factory builds
            metrics: Optional metrics collector for the reconciler
            logger: Optional logger passed to every component
        """
        self.clock = clock or SystemClock()
        self.metrics = metrics
        self.logger = logger

    def create_file_store(self, config: StoreConfig) -> FileSubscriptionStore:
        """Create a file-backed subscription store."""
        return FileSubscriptionStore(config, clock=self.clock, logger=self.logger)

    def create_ingest_use_case(self, store: SubscriptionStorePort) -> IngestContractUseCase:
        """Create a contract ingestion use case over ``store``."""
        from ..application.use_cases import IngestContractUseCase

        return IngestContractUseCase(store=store, logger=self.logger)

    def create_reconcile_use_case(
        self,
        store: SubscriptionStorePort,
        payment_session: PaymentSessionPort,
        authorizer: ChargeAuthorizerPort,
        listener: ReconcileListenerPort,
        config: ReconcilerConfig | None = None,
    ) -> ReconcileCycleUseCase:
        """Create a reconciliation use case.

        Args:
            store: Subscription store to reconcile
            payment_session: Merchant payment protocol
            authorizer: Policy deciding on each charge
            listener: Receiver of cycle events
            config: Reconciler settings, defaults when omitted

        Returns:
            Configured reconciliation use case instance
        """
        from ..application.use_cases import ReconcileCycleUseCase

        config = config or ReconcilerConfig()
        return ReconcileCycleUseCase(
            store=store,
            payment_session=payment_session,
            authorizer=authorizer,
            listener=listener,
            clock=self.clock,
            metrics=self.metrics,
            logger=self.logger,
            verify_identity=config.verify_identity,
            period_scoped_totals=config.period_scoped_totals,
        )

    def create_reconcile_use_case_from_callback(
        self,
        store: SubscriptionStorePort,
        payment_session: PaymentSessionPort,
        callback: ReconcileCallback,
        config: ReconcilerConfig | None = None,
    ) -> ReconcileCycleUseCase:
        """Create a reconciliation use case driven by a single wide callback."""
        adapter = CallbackAdapter(callback)
        return self.create_reconcile_use_case(
            store=store,
            payment_session=payment_session,
            authorizer=adapter,
            listener=adapter,
            config=config,
        )
