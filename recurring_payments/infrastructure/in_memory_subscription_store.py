"""In-memory implementation of the SubscriptionStorePort.

This is an infrastructure adapter for testing and for hosts that do not
need durability. It applies exactly the same merge rules as the file store.
"""

from collections.abc import Iterable

from ..domain.aggregates import StoreSnapshot, Subscription
from ..domain.exceptions import SubscriptionNotFoundError
from ..domain.models import Contract, PaymentRecord
from ..domain.value_objects import SubscriptionKey
from ..ports.clock import ClockPort
from ..ports.subscription_store import SubscriptionStorePort
from .system_clock import SystemClock


class InMemorySubscriptionStore(SubscriptionStorePort):
    """In-memory subscription store."""

    def __init__(self, clock: ClockPort | None = None) -> None:
        """Initialize the in-memory storage."""
        self._clock = clock or SystemClock()
        self._snapshot = StoreSnapshot()

    def load(self) -> StoreSnapshot:
        """Return the current snapshot."""
        return self._snapshot

    def merge_and_persist(
        self, key: SubscriptionKey, incoming: Iterable[Contract]
    ) -> Subscription:
        """Reconcile a refreshed contract set into memory."""
        now = self._clock.now()
        existing = self._snapshot.get(key)
        if existing is None:
            subscription = Subscription.create(key, incoming, now)
        else:
            subscription = existing.merge_contracts(incoming, now)
        self._snapshot = self._snapshot.upsert(subscription)
        return subscription

    def append_payment_record(self, key: SubscriptionKey, record: PaymentRecord) -> Subscription:
        """Append a payment to the history in memory."""
        existing = self._snapshot.get(key)
        if existing is None:
            raise SubscriptionNotFoundError(str(key))
        subscription = existing.with_payment(record)
        self._snapshot = self._snapshot.upsert(subscription)
        return subscription

    def clear(self) -> None:
        """Clear all stored subscriptions (useful for testing)."""
        self._snapshot = StoreSnapshot()

    def get_all(self) -> list[Subscription]:
        """Get all stored subscriptions (useful for testing)."""
        return list(self._snapshot.all_subscriptions())
