"""Tests for the Subscription aggregate and StoreSnapshot."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from recurring_payments.domain.aggregates import StoreSnapshot, Subscription
from tests.builders import NOW, ContractBuilder, make_key, make_payment


@pytest.fixture
def subscription():
    """Subscription with two active contracts and some history."""
    return Subscription(
        merchant_id="merchant-1",
        subscription_id=b"sub-1",
        contracts=(ContractBuilder(b"c1").build(), ContractBuilder(b"c2").build()),
        payments=(
            make_payment(b"c1", 100, paid_at=NOW - timedelta(days=40)),
            make_payment(b"c1", 200, paid_at=NOW - timedelta(days=2)),
        ),
    )


class TestSubscription:
    """Test cases for the Subscription aggregate."""

    def test_create_drops_cancelled_contracts(self):
        """Test that a new subscription never stores a cancelled contract."""
        active = ContractBuilder(b"c1").build()
        cancelled = ContractBuilder(b"c2").cancelled().build()

        subscription = Subscription.create(make_key(), [active, cancelled], NOW)

        assert subscription.key == make_key()
        assert subscription.contracts == (active,)
        assert subscription.payments == ()

    def test_duplicate_contract_ids_rejected(self):
        """Test that contract ids are unique within a subscription."""
        contract = ContractBuilder(b"c1").build()
        with pytest.raises(ValidationError, match="Duplicate contract id"):
            Subscription(merchant_id="m", subscription_id=b"s", contracts=(contract, contract))

    def test_merge_keeps_history(self, subscription):
        """Test that cancelling a contract leaves its payments in history."""
        cancelled_c1 = ContractBuilder(b"c1").cancelled().build()

        merged = subscription.merge_contracts([cancelled_c1], NOW)

        assert [c.contract_id for c in merged.contracts] == [b"c2"]
        assert merged.payments == subscription.payments
        # Receiver is unchanged
        assert len(subscription.contracts) == 2

    def test_with_payment_appends(self, subscription):
        """Test that payments are appended in order."""
        record = make_payment(b"c2", 7)

        updated = subscription.with_payment(record)

        assert updated.payments[-1] == record
        assert len(updated.payments) == 3
        assert len(subscription.payments) == 2

    def test_active_contracts(self):
        """Test that only contracts inside their window are active."""
        active = ContractBuilder(b"c1").build()
        future = ContractBuilder(b"c2").starting(NOW + timedelta(days=1)).build()
        subscription = Subscription(
            merchant_id="m", subscription_id=b"s", contracts=(active, future)
        )

        assert subscription.active_contracts(NOW) == [active]
        assert subscription.active_contracts(NOW + timedelta(days=2)) == [active, future]

    def test_get_contract(self, subscription):
        """Test looking up contracts by id."""
        assert subscription.get_contract(b"c2").contract_id == b"c2"
        assert subscription.get_contract(b"missing") is None

    def test_amount_paid_in_period(self, subscription):
        """Test summing history over a window and overall."""
        assert subscription.amount_paid_in_period(b"c1") == 300
        assert subscription.amount_paid_in_period(b"c1", NOW - timedelta(days=30), NOW) == 200
        assert subscription.amount_paid_in_period(b"c2") == 0


class TestStoreSnapshot:
    """Test cases for StoreSnapshot."""

    def test_empty_snapshot(self):
        """Test that an empty snapshot yields nothing."""
        snapshot = StoreSnapshot()
        assert len(snapshot) == 0
        assert list(snapshot.all_subscriptions()) == []
        assert snapshot.get(make_key()) is None

    def test_iteration_is_restartable(self, subscription):
        """Test that each call starts a fresh iteration."""
        snapshot = StoreSnapshot(subscriptions=(subscription,))

        assert list(snapshot.all_subscriptions()) == [subscription]
        assert list(snapshot.all_subscriptions()) == [subscription]

    def test_duplicate_keys_rejected(self, subscription):
        """Test that a snapshot never holds two subscriptions with one key."""
        with pytest.raises(ValidationError, match="Duplicate subscription key"):
            StoreSnapshot(subscriptions=(subscription, subscription))

    def test_upsert_replaces_in_place(self, subscription):
        """Test that upserting an existing key keeps its position."""
        other = Subscription.create(make_key("merchant-2"), [], NOW)
        snapshot = StoreSnapshot(subscriptions=(subscription, other))

        updated = snapshot.upsert(subscription.with_payment(make_payment(b"c2", 1)))

        assert [s.key for s in updated.all_subscriptions()] == [subscription.key, other.key]
        assert len(updated.get(subscription.key).payments) == 3
        assert len(snapshot.get(subscription.key).payments) == 2

    def test_upsert_appends_new(self, subscription):
        """Test that upserting a new key appends it."""
        other = Subscription.create(make_key("merchant-2"), [], NOW)

        updated = StoreSnapshot(subscriptions=(subscription,)).upsert(other)

        assert [s.key for s in updated.all_subscriptions()] == [subscription.key, other.key]

    def test_amount_paid_in_period(self, subscription):
        """Test amounts through the snapshot, including unknown keys."""
        snapshot = StoreSnapshot(subscriptions=(subscription,))

        assert snapshot.amount_paid_in_period(make_key(), b"c1") == 300
        assert snapshot.amount_paid_in_period(make_key("nobody"), b"c1") == 0
