"""Infrastructure layer - Concrete implementations of ports."""

from .callback_adapter import CallbackAdapter
from .config import LogContext, ReconcilerConfig, StoreConfig
from .factories import DefaultUseCaseFactory
from .file_subscription_store import FileSubscriptionStore
from .in_memory_metrics import InMemoryMetrics
from .in_memory_subscription_store import InMemorySubscriptionStore
from .simple_logger import SimpleLogger
from .system_clock import FixedClock, SystemClock

__all__ = [
    "CallbackAdapter",
    "DefaultUseCaseFactory",
    "FileSubscriptionStore",
    "FixedClock",
    "InMemoryMetrics",
    "InMemorySubscriptionStore",
    "LogContext",
    "ReconcilerConfig",
    "SimpleLogger",
    "StoreConfig",
    "SystemClock",
]
