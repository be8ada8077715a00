"""Tests for reconciliation events."""

import pytest
from pydantic import ValidationError

from recurring_payments.domain.enums import SkipReason
from recurring_payments.domain.events import (
    ChargeSkipped,
    ContractFailed,
    CycleAborted,
    CycleCompleted,
    PaymentAcknowledged,
)
from tests.builders import ContractBuilder, QuoteBuilder, make_key


class TestReconcileEvents:
    """Test cases for event construction."""

    def test_payment_acknowledged(self):
        """Test the acknowledgement event keeps the ack handle as is."""
        quote = QuoteBuilder().build()
        ack = object()

        event = PaymentAcknowledged(
            subscription=make_key(),
            contract_id=b"c1",
            amount=500,
            payment_request=quote.payment_request,
            ack=ack,
        )

        assert event.event_type == "PaymentAcknowledged"
        assert event.ack is ack
        assert event.event_id
        assert event.occurred_at.tzinfo is not None

    def test_charge_skipped(self):
        """Test the skip event."""
        event = ChargeSkipped(
            subscription=make_key(), contract_id=b"c1", reason=SkipReason.NO_CHARGE
        )
        assert event.event_type == "ChargeSkipped"
        assert event.amount == 0

    def test_contract_failed_carries_error(self):
        """Test that failure events keep the original exception."""
        error = RuntimeError("boom")
        contract = ContractBuilder().build()

        event = ContractFailed(error=error, subscription=make_key(), contract=contract)

        assert event.event_type == "ContractFailed"
        assert event.error is error
        assert event.contract == contract

    def test_cycle_events(self):
        """Test cycle level events."""
        aborted = CycleAborted(error=OSError("disk"))
        completed = CycleCompleted(paid_count=2)

        assert aborted.event_type == "CycleAborted"
        assert completed.event_type == "CycleCompleted"
        assert completed.aborted is False

    def test_event_type_cannot_be_overridden(self):
        """Test that subclasses always set their own type."""
        event = CycleCompleted(paid_count=0, event_type="Other")
        assert event.event_type == "CycleCompleted"

    def test_events_are_immutable(self):
        """Test that events cannot be changed."""
        event = CycleCompleted(paid_count=1)
        with pytest.raises(ValidationError):
            event.paid_count = 2

    def test_unique_ids(self):
        """Test that every event gets its own id."""
        assert CycleCompleted(paid_count=0).event_id != CycleCompleted(paid_count=0).event_id
