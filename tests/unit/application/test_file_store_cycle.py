"""Tests for ingestion and reconciliation over the file-backed store."""

import pytest

from recurring_payments.application.use_cases import IngestContractUseCase, ReconcileCycleUseCase
from recurring_payments.domain.models import ContractBundle
from recurring_payments.domain.value_objects import SubscriptionKey
from tests.builders import ContractBuilder, QuoteBuilder

KEY = SubscriptionKey(merchant_id="m1", subscription_id=b"s1")


@pytest.fixture
def ingest(file_store):
    return IngestContractUseCase(file_store)


@pytest.fixture
def reconcile(file_store, payment_session, authorizer, listener, clock):
    return ReconcileCycleUseCase(
        store=file_store,
        payment_session=payment_session,
        authorizer=authorizer,
        listener=listener,
        clock=clock,
    )


def bundle() -> ContractBundle:
    return ContractBundle(
        merchant_id="m1", subscription_id=b"s1", contracts=(ContractBuilder(b"c1").build(),)
    )


class TestFileStoreCycle:
    """Test cases for a subscription ingested and paid through the store file."""

    @pytest.mark.asyncio
    async def test_ingested_contract_is_paid(self, ingest, reconcile, file_store, listener):
        """Test that a stored contract is charged and the payment lands on disk."""
        await ingest.execute(bundle())

        report = await reconcile.execute()

        assert report.paid_count == 1
        assert not report.aborted
        assert [event.event_type for event in listener.events] == [
            "PaymentAcknowledged",
            "CycleCompleted",
        ]
        assert listener.events[-1].paid_count == 1
        assert file_store.load().amount_paid_in_period(KEY, b"c1") == 500

    @pytest.mark.asyncio
    async def test_zero_charge_leaves_file_untouched(
        self, ingest, reconcile, file_store, payment_session, authorizer
    ):
        """Test that a cycle with nothing to pay does not rewrite the store."""
        payment_session.fetch_current_charge.return_value = QuoteBuilder().with_amounts(0).build()
        await ingest.execute(bundle())
        before = file_store.path.read_bytes()

        report = await reconcile.execute()

        assert report.paid_count == 0
        authorizer.authorize.assert_not_awaited()
        assert file_store.path.read_bytes() == before
        assert file_store.load().get(KEY).payments == ()
