"""Domain services containing business logic.

Following Domain-Driven Design principles, these services encapsulate
business rules that span several entities: how a refreshed contract set is
reconciled with the stored one, and how much a contract has already consumed.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from .models import Contract, PaymentRecord


class ContractMergeService:
    """Domain service reconciling stored contracts with a refreshed set."""

    @staticmethod
    def merge(
        existing: Sequence[Contract],
        incoming: Iterable[Contract],
        now: datetime,
    ) -> tuple[Contract, ...]:
        """Compute the current contract set after a refresh.

        Business Rules:
        - Existing contracts not superseded by an incoming contract id are kept
        - Incoming contracts replace existing ones with the same id
        - Incoming contracts that are already cancelled are dropped, which also
          removes the contract they supersede
        - Contract ids stay unique; for duplicate incoming ids the last one wins

        Args:
            existing: Contracts currently stored, in stored order
            incoming: Contracts received from the merchant
            now: Reference time for the cancellation rule

        Returns:
            The updated contract set, existing survivors first
        """
        incoming = list(incoming)
        superseded = {contract.contract_id for contract in incoming}

        updated: dict[bytes, Contract] = {
            contract.contract_id: contract
            for contract in existing
            if contract.contract_id not in superseded
        }
        for contract in incoming:
            updated.pop(contract.contract_id, None)
            if not contract.is_cancelled(now):
                updated[contract.contract_id] = contract

        return tuple(updated.values())


class PaymentLedgerService:
    """Domain service answering how much a contract has consumed."""

    @staticmethod
    def payments_in_window(
        payments: Iterable[PaymentRecord],
        contract_id: bytes,
        period_start: datetime | None = None,
        period_end: datetime | None = None,
    ) -> list[PaymentRecord]:
        """Select the payments of one contract inside an inclusive window.

        Either bound may be omitted to leave that side open.
        """
        return [
            payment
            for payment in payments
            if payment.contract_id == contract_id
            and (period_start is None or payment.paid_at >= period_start)
            and (period_end is None or payment.paid_at <= period_end)
        ]

    @classmethod
    def amount_paid(
        cls,
        payments: Iterable[PaymentRecord],
        contract_id: bytes,
        period_start: datetime | None = None,
        period_end: datetime | None = None,
    ) -> int:
        """Sum the payments of one contract inside an inclusive window.

        With both bounds absent the contract's entire history is summed.
        An empty history sums to zero.
        """
        return sum(
            payment.amount
            for payment in cls.payments_in_window(payments, contract_id, period_start, period_end)
        )
