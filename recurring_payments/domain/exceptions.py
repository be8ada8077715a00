"""Domain-specific exceptions for the recurring payments package."""


class RecurringPaymentError(Exception):
    """Base exception for all recurring payment errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StoreError(RecurringPaymentError):
    """Subscription store errors."""

    def __init__(self, message: str, path: str | None = None, operation: str | None = None):
        super().__init__(message)
        self.path = path
        self.operation = operation
        if path:
            self.details["path"] = path
        if operation:
            self.details["operation"] = operation


class StoreReadError(StoreError):
    """Raised when the backing file cannot be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read subscription store '{path}': {reason}", path, "load")


class CorruptStoreError(StoreError):
    """Raised when the backing file exists but a record cannot be decoded.

    The whole load fails; no partial recovery is attempted.
    """

    def __init__(self, path: str, reason: str, record_index: int | None = None):
        super().__init__(f"Subscription store '{path}' is unreadable: {reason}", path, "load")
        self.record_index = record_index
        if record_index is not None:
            self.details["record_index"] = record_index


# Name used by hosts that follow the store taxonomy literally
StoreUnreadableError = CorruptStoreError


class PersistenceError(StoreError):
    """Raised when writing or renaming the store file fails.

    The on-disk file is left as the previous valid snapshot.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to persist subscription store '{path}': {reason}", path, "persist")


class SubscriptionNotFoundError(StoreError):
    """Raised when an operation targets a subscription that is not stored."""

    def __init__(self, subscription: str):
        super().__init__(f"Subscription '{subscription}' not found", operation="lookup")
        self.subscription = subscription
        self.details["subscription"] = subscription


class SerializationError(RecurringPaymentError):
    """Serialization/deserialization errors."""

    pass


class CollaboratorError(RecurringPaymentError):
    """Errors raised by an external payment collaborator."""

    def __init__(self, message: str, polling_url: str | None = None):
        super().__init__(message)
        self.polling_url = polling_url
        if polling_url:
            self.details["polling_url"] = polling_url


class ChargeFetchError(CollaboratorError):
    """Raised when a fresh charge cannot be fetched from a merchant."""

    pass


class PaymentSendError(CollaboratorError):
    """Raised when a payment cannot be delivered to a merchant."""

    pass
