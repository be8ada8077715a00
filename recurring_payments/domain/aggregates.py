"""Domain aggregates following Domain-Driven Design principles.

Aggregates are clusters of domain objects that can be treated as a single unit.
They enforce consistency boundaries and encapsulate business rules.

Both aggregates here have value semantics: operations that change state
return a new instance and never mutate the receiver, so a snapshot read at
the start of a cycle cannot change underneath the code holding it.
"""

from collections.abc import Iterable, Iterator
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Contract, PaymentRecord
from .services import ContractMergeService, PaymentLedgerService
from .value_objects import SubscriptionKey


class Subscription(BaseModel):
    """Subscription aggregate root: one merchant relationship.

    Owns the current contract set and the ordered payment history. History
    records may reference contracts that are no longer in the current set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Identity
    merchant_id: str = Field(..., min_length=1)
    subscription_id: bytes

    # State
    contracts: tuple[Contract, ...] = Field(default_factory=tuple)
    payments: tuple[PaymentRecord, ...] = Field(default_factory=tuple)

    @field_validator("contracts")
    @classmethod
    def validate_unique_contract_ids(cls, v: tuple[Contract, ...]) -> tuple[Contract, ...]:
        """Contract ids must be unique within the current set."""
        ids = [contract.contract_id for contract in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate contract id in subscription")
        return v

    @classmethod
    def create(
        cls, key: SubscriptionKey, contracts: Iterable[Contract], now: datetime
    ) -> "Subscription":
        """Create a subscription from its first contract bundle.

        Contracts that are already cancelled are not stored.
        """
        return cls(
            merchant_id=key.merchant_id,
            subscription_id=key.subscription_id,
            contracts=ContractMergeService.merge((), contracts, now),
        )

    @property
    def key(self) -> SubscriptionKey:
        """Identity of this subscription."""
        return SubscriptionKey(merchant_id=self.merchant_id, subscription_id=self.subscription_id)

    def merge_contracts(self, incoming: Iterable[Contract], now: datetime) -> "Subscription":
        """Return a copy with the contract set refreshed; history is untouched."""
        merged = ContractMergeService.merge(self.contracts, incoming, now)
        return self.model_copy(update={"contracts": merged})

    def with_payment(self, record: PaymentRecord) -> "Subscription":
        """Return a copy with ``record`` appended to the history."""
        return self.model_copy(update={"payments": (*self.payments, record)})

    def active_contracts(self, now: datetime) -> list[Contract]:
        """Contracts whose validity window contains ``now``, in stored order."""
        return [contract for contract in self.contracts if contract.is_active(now)]

    def get_contract(self, contract_id: bytes) -> Contract | None:
        """Look up a contract of the current set by id."""
        for contract in self.contracts:
            if contract.contract_id == contract_id:
                return contract
        return None

    def amount_paid_in_period(
        self,
        contract_id: bytes,
        period_start: datetime | None = None,
        period_end: datetime | None = None,
    ) -> int:
        """Amount paid toward ``contract_id`` within an inclusive window."""
        return PaymentLedgerService.amount_paid(
            self.payments, contract_id, period_start, period_end
        )


class StoreSnapshot(BaseModel):
    """Immutable view of every stored subscription, in on-disk order."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    subscriptions: tuple[Subscription, ...] = Field(default_factory=tuple)

    @field_validator("subscriptions")
    @classmethod
    def validate_unique_keys(cls, v: tuple[Subscription, ...]) -> tuple[Subscription, ...]:
        """The store never holds two subscriptions with the same key."""
        keys = [subscription.key for subscription in v]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate subscription key in store")
        return v

    def __len__(self) -> int:
        return len(self.subscriptions)

    def all_subscriptions(self) -> Iterator[Subscription]:
        """Iterate the subscriptions; every call starts a fresh iteration."""
        return iter(self.subscriptions)

    def get(self, key: SubscriptionKey) -> Subscription | None:
        """Look up a subscription by key."""
        for subscription in self.subscriptions:
            if subscription.key == key:
                return subscription
        return None

    def amount_paid_in_period(
        self,
        key: SubscriptionKey,
        contract_id: bytes,
        period_start: datetime | None = None,
        period_end: datetime | None = None,
    ) -> int:
        """Amount paid toward a contract of ``key`` within an inclusive window.

        Unknown subscriptions and contracts without history sum to zero.
        """
        subscription = self.get(key)
        if subscription is None:
            return 0
        return subscription.amount_paid_in_period(contract_id, period_start, period_end)

    def upsert(self, subscription: Subscription) -> "StoreSnapshot":
        """Return a copy with ``subscription`` replaced in place or appended."""
        replaced = False
        updated = []
        for existing in self.subscriptions:
            if existing.key == subscription.key:
                updated.append(subscription)
                replaced = True
            else:
                updated.append(existing)
        if not replaced:
            updated.append(subscription)
        return StoreSnapshot(subscriptions=tuple(updated))
