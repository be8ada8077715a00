"""Payment session port - the merchant-facing payment protocol.

Fetching a fresh charge and delivering a payment are the only operations of
a reconciliation cycle that go over the network.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any

from ..domain.models import ChargeQuote


class PaymentSessionPort(ABC):
    """Abstract interface to a merchant's payment endpoint."""

    @abstractmethod
    async def fetch_current_charge(self, polling_url: str, verify_identity: bool) -> ChargeQuote:
        """Ask the merchant what is owed right now.

        Args:
            polling_url: The contract's polling endpoint
            verify_identity: Whether the merchant's identity must be verified

        Returns:
            The requested charge together with the prepared transaction
        """
        ...

    @abstractmethod
    async def send_payment(self, quote: ChargeQuote) -> Awaitable[Any]:
        """Deliver the prepared transaction for ``quote`` to the merchant.

        Returns once the payment has been handed off. The returned awaitable
        resolves to the merchant's acknowledgement and need not be resolved
        by the caller.
        """
        ...
