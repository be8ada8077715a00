"""File-backed implementation of the SubscriptionStorePort.

The whole store is one file of length-delimited records. Every change is a
load-modify-persist cycle: the new content is written to a temporary file in
the same directory and atomically renamed over the store file, so a crash at
any point leaves either the previous or the new complete file on disk.

There is no locking. Two writers racing on the same file both succeed and
the last rename wins; callers must keep a single reconciliation in flight per
store file.
"""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from collections.abc import Iterable
from pathlib import Path

from ..domain.aggregates import StoreSnapshot, Subscription
from ..domain.exceptions import (
    CorruptStoreError,
    PersistenceError,
    SerializationError,
    StoreReadError,
    SubscriptionNotFoundError,
)
from ..domain.models import Contract, PaymentRecord
from ..domain.value_objects import SubscriptionKey
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.subscription_store import SubscriptionStorePort
from .config import LogContext, StoreConfig
from .serialization import decode_records, encode_records
from .simple_logger import SimpleLogger
from .system_clock import SystemClock


class FileSubscriptionStore(SubscriptionStorePort):
    """Subscription store persisted to a single local file."""

    def __init__(
        self,
        config: StoreConfig,
        clock: ClockPort | None = None,
        logger: LoggerPort | None = None,
    ):
        """Initialize the store.

        Args:
            config: Store location and durability settings
            clock: Time source for the contract cancellation rule
            logger: Logger for store operations
        """
        self._config = config
        self._clock = clock or SystemClock()
        self._logger = logger or SimpleLogger("recurring_payments.store")

    @property
    def path(self) -> Path:
        """Path of the store file."""
        return self._config.path

    def load(self) -> StoreSnapshot:
        """Read every stored subscription, creating an empty store if absent."""
        path = self.path
        log_ctx = LogContext(operation="load", component="FileSubscriptionStore")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=True)
            data = path.read_bytes()
        except OSError as e:
            self._logger.error("Failed to read subscription store", **log_ctx.with_error(e).to_dict())
            raise StoreReadError(str(path), str(e)) from e

        try:
            subscriptions = decode_records(data)
            snapshot = StoreSnapshot(subscriptions=tuple(subscriptions))
        except SerializationError as e:
            self._logger.error("Subscription store is corrupt", **log_ctx.with_error(e).to_dict())
            raise CorruptStoreError(
                str(path), e.message, record_index=e.details.get("record_index")
            ) from e
        except ValueError as e:
            # Records decode but violate store invariants (duplicate keys)
            self._logger.error("Subscription store is corrupt", **log_ctx.with_error(e).to_dict())
            raise CorruptStoreError(str(path), str(e)) from e

        self._logger.debug(
            f"Loaded {len(snapshot)} subscriptions from {path}", **log_ctx.to_dict()
        )
        return snapshot

    def merge_and_persist(
        self, key: SubscriptionKey, incoming: Iterable[Contract]
    ) -> Subscription:
        """Reconcile a refreshed contract set and persist the whole store."""
        now = self._clock.now()
        snapshot = self.load()

        existing = snapshot.get(key)
        if existing is None:
            subscription = Subscription.create(key, incoming, now)
            self._logger.info(
                f"Storing new subscription with {len(subscription.contracts)} contracts",
                subscription=str(key),
            )
        else:
            subscription = existing.merge_contracts(incoming, now)
            self._logger.info(
                f"Refreshed subscription contracts: {len(existing.contracts)} -> "
                f"{len(subscription.contracts)}",
                subscription=str(key),
            )

        self._persist(snapshot.upsert(subscription))
        return subscription

    def append_payment_record(self, key: SubscriptionKey, record: PaymentRecord) -> Subscription:
        """Append one payment to the history and persist the whole store."""
        snapshot = self.load()

        existing = snapshot.get(key)
        if existing is None:
            raise SubscriptionNotFoundError(str(key))

        subscription = existing.with_payment(record)
        self._persist(snapshot.upsert(subscription))
        self._logger.debug(
            f"Recorded payment of {record.amount}",
            subscription=str(key),
            contract_id=record.contract_id.hex(),
        )
        return subscription

    def _persist(self, snapshot: StoreSnapshot) -> None:
        """Atomically replace the store file with ``snapshot``.

        Only the temporary file is touched before the rename; on any failure
        it is removed and the store file keeps its previous content.
        """
        path = self.path
        log_ctx = LogContext(operation="persist", component="FileSubscriptionStore")

        try:
            data = encode_records(snapshot.all_subscriptions())
        except SerializationError as e:
            raise PersistenceError(str(path), e.message) from e

        temp_path: str | None = None
        try:
            fd, temp_path = tempfile.mkstemp(
                prefix=f"{path.name}.", suffix=".tmp", dir=path.parent
            )
            with os.fdopen(fd, "wb") as output:
                # mkstemp creates 0600; keep the permissions of the file being replaced
                mode = self._existing_mode(path)
                if mode is not None:
                    os.fchmod(output.fileno(), mode)
                output.write(data)
                output.flush()
                if self._config.fsync:
                    os.fsync(output.fileno())
            self._replace(temp_path, path)
        except OSError as e:
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_path)
            self._logger.error(
                "Failed to persist subscription store", **log_ctx.with_error(e).to_dict()
            )
            raise PersistenceError(str(path), str(e)) from e

    @staticmethod
    def _existing_mode(path: Path) -> int | None:
        """Permission bits of ``path``, or None when it does not exist."""
        try:
            return stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            return None

    @staticmethod
    def _replace(source: str, target: Path) -> None:
        """Atomically rename ``source`` over ``target``."""
        os.replace(source, target)
