"""Ports layer - Interfaces for external communication."""

from .clock import ClockPort
from .logger import LoggerPort
from .metrics import MetricsPort
from .payment_session import PaymentSessionPort
from .reconcile_callback import ChargeAuthorizerPort, ReconcileCallback, ReconcileListenerPort
from .subscription_store import SubscriptionStorePort

__all__ = [
    "ChargeAuthorizerPort",
    "ClockPort",
    "LoggerPort",
    "MetricsPort",
    "PaymentSessionPort",
    "ReconcileCallback",
    "ReconcileListenerPort",
    "SubscriptionStorePort",
]
