"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock

import pytest

from recurring_payments.domain.events import ReconcileEvent
from recurring_payments.infrastructure.config import StoreConfig
from recurring_payments.infrastructure.file_subscription_store import FileSubscriptionStore
from recurring_payments.infrastructure.system_clock import FixedClock
from recurring_payments.ports.reconcile_callback import ReconcileListenerPort
from tests.builders import NOW, QuoteBuilder


class RecordingListener(ReconcileListenerPort):
    """Listener keeping every published event in order."""

    def __init__(self):
        self.events: list[ReconcileEvent] = []

    async def publish(self, event: ReconcileEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[ReconcileEvent]:
        return [event for event in self.events if event.event_type == event_type]


@pytest.fixture
def clock():
    """Clock frozen at the reference time used by the builders."""
    return FixedClock(NOW)


@pytest.fixture
def store_config(tmp_path):
    """Store configuration pointing into a temporary directory."""
    return StoreConfig(directory=tmp_path / "store")


@pytest.fixture
def file_store(store_config, clock):
    """File-backed store in a temporary directory."""
    return FileSubscriptionStore(store_config, clock=clock)


@pytest.fixture
def payment_session():
    """Payment session returning a 500 charge and an acknowledgement handle."""
    session = AsyncMock()
    session.fetch_current_charge = AsyncMock(return_value=QuoteBuilder().build())
    session.send_payment = AsyncMock(return_value="ack-handle")
    return session


@pytest.fixture
def authorizer():
    """Authorizer approving every charge."""
    mock = AsyncMock()
    mock.authorize = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def listener():
    """Listener recording published events."""
    return RecordingListener()
