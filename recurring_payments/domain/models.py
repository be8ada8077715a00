"""Domain models for recurring payment contracts and payments."""

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from .enums import PeriodType
from .value_objects import SubscriptionKey


class Contract(BaseModel):
    """One term sheet within a subscription.

    Holds the spending caps, the billing period, the validity window and the
    URL the merchant is polled on for each charge.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    contract_id: bytes = Field(..., min_length=1, description="Opaque contract identifier")
    polling_url: str = Field(..., min_length=1, description="Where fresh charges are fetched")
    max_amount_per_charge: int = Field(..., ge=0, description="Cap on a single charge")
    max_amount_per_period: int = Field(
        ..., ge=0, description="Cap on the sum of charges within one period"
    )
    period_type: PeriodType = Field(..., description="Billing period")
    starts_at: AwareDatetime = Field(..., description="Start of the validity window")
    ends_at: AwareDatetime | None = Field(default=None, description="End of the validity window")

    def is_active(self, now: datetime) -> bool:
        """Whether ``now`` falls inside the contract's validity window."""
        return self.starts_at <= now and (self.ends_at is None or self.ends_at >= now)

    def is_cancelled(self, now: datetime) -> bool:
        """Whether the contract has ended as of ``now``."""
        return self.ends_at is not None and self.ends_at <= now


class PaymentOutput(BaseModel):
    """A single output of a payment: an amount sent to an opaque destination."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    amount: int = Field(..., ge=0, description="Amount in the smallest currency unit")
    script: bytes = Field(default=b"", description="Opaque destination script")


class PaymentRequest(BaseModel):
    """Payment-protocol metadata as returned by a merchant.

    This package does not interpret this beyond its outputs and the flag telling
    whether it carries nested recurring terms.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    outputs: tuple[PaymentOutput, ...] = Field(default_factory=tuple)
    payment_url: str | None = None
    memo: str | None = None
    merchant_data: bytes | None = None
    created_at: AwareDatetime | None = None
    expires_at: AwareDatetime | None = None
    recurring_terms_present: bool = Field(
        default=False,
        description="True when the request embeds recurring payment terms",
    )

    @property
    def total_amount(self) -> int:
        """Amount requested, reconstructed from the outputs."""
        return sum(output.amount for output in self.outputs)


class ChargeQuote(BaseModel):
    """A fresh charge fetched from a merchant for one polling cycle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    payment_request: PaymentRequest
    prepared_transaction: bytes = Field(
        default=b"", description="Transaction prepared by the wallet for this request"
    )

    @property
    def amount(self) -> int:
        """Amount the merchant is asking for."""
        return self.payment_request.total_amount

    @property
    def has_recurring_terms(self) -> bool:
        """Whether the refresh illegally carries recurring terms."""
        return self.payment_request.recurring_terms_present


class PaymentRecord(BaseModel):
    """Historical evidence of one executed charge against a contract."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    contract_id: bytes = Field(..., min_length=1)
    paid_at: AwareDatetime
    amount: int = Field(..., ge=0)
    outputs: tuple[PaymentOutput, ...] = Field(default_factory=tuple)
    memo: str | None = None

    @model_validator(mode="after")
    def check_outputs_match_amount(self) -> "PaymentRecord":
        """The amount must be reconstructible from the outputs when present."""
        if self.outputs and sum(o.amount for o in self.outputs) != self.amount:
            raise ValueError("Payment amount does not match the sum of its outputs")
        return self

    @classmethod
    def from_quote(cls, contract_id: bytes, quote: ChargeQuote, paid_at: datetime) -> "PaymentRecord":
        """Record a charge that was sent for ``quote``."""
        return cls(
            contract_id=contract_id,
            paid_at=paid_at,
            amount=quote.amount,
            outputs=quote.payment_request.outputs,
            memo=quote.payment_request.memo,
        )


class ContractBundle(BaseModel):
    """Recurring terms received out of band when signing up with a merchant."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    merchant_id: str = Field(..., min_length=1)
    subscription_id: bytes
    contracts: tuple[Contract, ...] = Field(default_factory=tuple)
    memo: str | None = None
    merchant_data: bytes | None = None

    @property
    def key(self) -> SubscriptionKey:
        """Identity of the subscription these terms belong to."""
        return SubscriptionKey(merchant_id=self.merchant_id, subscription_id=self.subscription_id)

    @property
    def has_recurring_terms(self) -> bool:
        """Whether the bundle carries at least one contract."""
        return bool(self.contracts)


class ChargeAuthorizationRequest(BaseModel):
    """Everything an authorizer needs to decide on one charge.

    ``paid_this_period`` is what the contract already consumed inside
    ``[period_start, period_end]``; both bounds are None when the whole
    history was summed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    subscription: SubscriptionKey
    contract: Contract
    quote: ChargeQuote
    max_amount_per_charge: int
    period_type: PeriodType
    max_amount_per_period: int
    new_amount: int = Field(..., gt=0)
    paid_this_period: int = Field(..., ge=0)
    period_start: AwareDatetime | None = None
    period_end: AwareDatetime | None = None

    @property
    def payment_request(self) -> PaymentRequest:
        """The payment request prepared for this charge."""
        return self.quote.payment_request

    @property
    def exceeds_charge_cap(self) -> bool:
        """Whether the new amount is above the per-charge cap."""
        return self.new_amount > self.max_amount_per_charge

    @property
    def exceeds_period_cap(self) -> bool:
        """Whether paying the new amount would go above the per-period cap."""
        return self.paid_this_period + self.new_amount > self.max_amount_per_period
