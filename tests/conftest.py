"""Shared fakes and fixtures. No real app launches in tests."""

from decimal import Decimal

import pytest

from upi_tracker.audit import AuditLogger
from upi_tracker.ledger import Ledger
from upi_tracker.models.ledger import PersistedState
from upi_tracker.payments import PaymentCoordinator, UriReconciler
from upi_tracker.services.launcher import LaunchError, PaymentLauncher
from upi_tracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryStateStorage,
    PersistenceUnavailable,
)


class RecordingLauncher(PaymentLauncher):
    """Remembers every URI it was asked to open."""

    def __init__(self):
        self.launched: list[str] = []

    def launch(self, uri: str) -> None:
        self.launched.append(uri)


class UnsupportedLauncher(PaymentLauncher):
    """Environment without any UPI app."""

    def launch(self, uri: str) -> None:
        raise LaunchError(uri, "No app on this device can open UPI payment links")


class CrashingLauncher(PaymentLauncher):
    """Launcher failing with an unexpected error."""

    def launch(self, uri: str) -> None:
        raise RuntimeError("intent resolver crashed")


class BrokenStateStorage(InMemoryStateStorage):
    """Every save fails."""

    def save(self, state: PersistedState) -> None:
        raise PersistenceUnavailable("disk full")


class CrashingStateStorage(InMemoryStateStorage):
    """Saves fail with an error the backend did not translate."""

    def save(self, state: PersistedState) -> None:
        raise OSError("disk gone")


@pytest.fixture
def storage():
    return InMemoryStateStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def ledger(storage, audit_logger):
    ledger = Ledger(gateway=storage, audit_logger=audit_logger)
    ledger.set_budget(Decimal("5000"))
    return ledger


@pytest.fixture
def launcher():
    return RecordingLauncher()


@pytest.fixture
def coordinator(ledger, launcher, audit_logger):
    return PaymentCoordinator(
        ledger=ledger,
        launcher=launcher,
        reconciler=UriReconciler(scheme="upi", currency="INR"),
        default_note="Expense",
        prompt_delay_ms=1500,
        audit_logger=audit_logger,
    )


@pytest.fixture
def unsupported_launcher():
    return UnsupportedLauncher()


@pytest.fixture
def crashing_launcher():
    return CrashingLauncher()


@pytest.fixture
def broken_storage():
    return BrokenStateStorage()


@pytest.fixture
def crashing_storage():
    return CrashingStateStorage()
