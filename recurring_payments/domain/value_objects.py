"""Domain value objects following Domain-Driven Design principles.

These value objects encapsulate identity concepts and provide type safety,
validation, and a stable printable form for what would otherwise be
loose tuples of strings and bytes.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubscriptionKey(BaseModel):
    """Value object identifying one subscription.

    A subscription is keyed by the merchant identifier together with the
    merchant-assigned opaque subscription identifier. The store never holds
    two subscriptions with the same key.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    merchant_id: str = Field(..., min_length=1, description="Merchant identifier")
    subscription_id: bytes = Field(..., description="Opaque subscription identifier")

    @field_validator("merchant_id")
    @classmethod
    def validate_merchant_id(cls, v: str) -> str:
        """Merchant identifiers must not be blank."""
        if not v.strip():
            raise ValueError("Merchant ID cannot be empty or whitespace")
        return v

    @classmethod
    def of(cls, merchant_id: str, subscription_id: bytes | str) -> "SubscriptionKey":
        """Build a key, encoding text subscription identifiers as UTF-8."""
        if isinstance(subscription_id, str):
            subscription_id = subscription_id.encode()
        return cls(merchant_id=merchant_id, subscription_id=subscription_id)

    def __str__(self) -> str:
        """Printable form used in logs, metrics and error details."""
        return f"{self.merchant_id}/{self.subscription_id.hex()}"

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if isinstance(other, SubscriptionKey):
            return (
                self.merchant_id == other.merchant_id
                and self.subscription_id == other.subscription_id
            )
        return False

    def __hash__(self) -> int:
        """Make hashable for use in sets and dicts."""
        return hash((self.merchant_id, self.subscription_id))


def contract_label(contract_id: bytes) -> str:
    """Printable form of an opaque contract identifier."""
    return contract_id.hex()
