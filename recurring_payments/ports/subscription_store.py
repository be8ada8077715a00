"""Subscription store port interface.

This module defines the persistence contract for subscriptions following
hexagonal architecture principles. The store exclusively owns the stored
representation; callers read immutable snapshots and send every change
back through the store's operations.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ..domain.aggregates import StoreSnapshot, Subscription
from ..domain.models import Contract, PaymentRecord
from ..domain.value_objects import SubscriptionKey


class SubscriptionStorePort(ABC):
    """Abstract store for subscription aggregates.

    Operations are synchronous: implementations perform local I/O only.
    No operation retries internally; retry policy belongs to the caller.
    """

    @abstractmethod
    def load(self) -> StoreSnapshot:
        """Read every stored subscription.

        A store that does not exist yet is empty, never an error.

        Raises:
            StoreReadError: If the backing storage cannot be read
            CorruptStoreError: If any stored record cannot be decoded
        """
        ...

    @abstractmethod
    def merge_and_persist(
        self, key: SubscriptionKey, incoming: Iterable[Contract]
    ) -> Subscription:
        """Reconcile a refreshed contract set into the subscription for ``key``.

        Creates the subscription when it does not exist. Payment history is
        left untouched.

        Returns:
            The subscription as persisted

        Raises:
            PersistenceError: If the updated store cannot be written
        """
        ...

    @abstractmethod
    def append_payment_record(self, key: SubscriptionKey, record: PaymentRecord) -> Subscription:
        """Append ``record`` to the payment history of ``key``.

        Returns:
            The subscription as persisted

        Raises:
            SubscriptionNotFoundError: If no subscription exists for ``key``
            PersistenceError: If the updated store cannot be written
        """
        ...
