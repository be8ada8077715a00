"""Domain layer - Core business logic and entities."""

from .aggregates import StoreSnapshot, Subscription
from .enums import PeriodType, SkipReason
from .events import (
    ChargeSkipped,
    ContractFailed,
    CycleAborted,
    CycleCompleted,
    PaymentAcknowledged,
    ReconcileEvent,
)
from .exceptions import (
    ChargeFetchError,
    CollaboratorError,
    CorruptStoreError,
    PaymentSendError,
    PersistenceError,
    RecurringPaymentError,
    SerializationError,
    StoreError,
    StoreReadError,
    StoreUnreadableError,
    SubscriptionNotFoundError,
)
from .models import (
    ChargeAuthorizationRequest,
    ChargeQuote,
    Contract,
    ContractBundle,
    PaymentOutput,
    PaymentRecord,
    PaymentRequest,
)
from .services import ContractMergeService, PaymentLedgerService
from .value_objects import SubscriptionKey

__all__ = [
    "ChargeAuthorizationRequest",
    "ChargeFetchError",
    "ChargeQuote",
    "ChargeSkipped",
    "CollaboratorError",
    "Contract",
    "ContractBundle",
    "ContractFailed",
    "ContractMergeService",
    "CorruptStoreError",
    "CycleAborted",
    "CycleCompleted",
    "PaymentAcknowledged",
    "PaymentLedgerService",
    "PaymentOutput",
    "PaymentRecord",
    "PaymentRequest",
    "PaymentSendError",
    "PeriodType",
    "PersistenceError",
    "ReconcileEvent",
    "RecurringPaymentError",
    "SerializationError",
    "SkipReason",
    "StoreError",
    "StoreReadError",
    "StoreSnapshot",
    "StoreUnreadableError",
    "Subscription",
    "SubscriptionKey",
    "SubscriptionNotFoundError",
]
