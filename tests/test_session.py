"""End-to-end tests for the tracker session (fake launcher, in-memory storage)."""

import pytest
from decimal import Decimal
from urllib.parse import parse_qsl, urlsplit

from upi_tracker.config import TrackerSettings
from upi_tracker.models import (
    AuditEventType,
    BareAddress,
    InvalidPayload,
    MerchantDescriptor,
    PersistedState,
    Transaction,
)
from upi_tracker.orchestrator import create_session, load_ledger
from upi_tracker.services.storage import InMemoryStateStorage, JsonFileStateStorage


MERCHANT_QR = "upi://pay?pa=shop@bank&pn=Corner%20Store&mc=5411&tr=REF123&am=10.00&cu=INR"


@pytest.fixture
def settings():
    return TrackerSettings(confirm_prompt_delay_ms=0)


@pytest.fixture
def session(storage, launcher, settings, audit_logger):
    session = create_session(
        storage=storage,
        launcher=launcher,
        settings=settings,
        audit_logger=audit_logger,
    )
    session.setup_budget(Decimal("5000"))
    return session


class TestScanToLedger:
    """Tests for the full scan → pay → confirm flow."""

    def test_merchant_scan_payment(self, session, launcher, storage):
        """Test merchant codes reach the payment app and the ledger is charged."""
        result = session.on_scan(MERCHANT_QR)
        assert isinstance(result, MerchantDescriptor)

        session.draft.total_amount = "250.00"
        session.start_payment()

        params = parse_qsl(urlsplit(launcher.launched[0]).query)
        keys = [key for key, _ in params]
        assert dict(params)["mc"] == "5411"
        assert dict(params)["tr"] == "REF123"
        assert dict(params)["am"] == "250.00"
        assert keys.count("am") == 1

        tx = session.confirm_payment(succeeded=True)
        assert tx.note == "Corner Store"
        assert storage.state.spent == Decimal("250")
        assert session.summary().remaining == Decimal("4750")

    def test_bare_address_payment(self, session, launcher):
        assert isinstance(session.on_scan("friend@okbank"), BareAddress)
        session.draft.total_amount = "1000"
        session.draft.toggle_split()
        session.draft.my_share = "400"
        session.start_payment()
        assert launcher.launched == ["upi://pay?pa=friend@okbank&am=1000.00&cu=INR"]

        session.confirm_payment(succeeded=True)
        summary = session.summary()
        assert summary.spent == Decimal("400")
        assert summary.recent[0].is_split is True

    def test_invalid_scan_keeps_draft(self, session, audit_storage):
        session.on_scan("friend@okbank")
        result = session.on_scan("just some text")
        assert isinstance(result, InvalidPayload)
        assert session.draft.payee_address == "friend@okbank"
        assert audit_storage.events[-1].event_type == AuditEventType.SCAN_REJECTED

    def test_long_scan_accepted(self, session, audit_storage):
        address = "a" * 600 + "@bank"
        assert isinstance(session.on_scan(address), BareAddress)
        assert session.draft.payee_address == address
        assert audit_storage.events[-1].event_type == AuditEventType.SCAN_INTERPRETED

    def test_confirm_survives_save_crash(self, crashing_storage, launcher, settings, audit_logger, audit_storage):
        """Test a storage crash after commit still finishes the confirmation."""
        session = create_session(crashing_storage, launcher, settings, audit_logger)
        session.on_scan("friend@okbank")
        session.draft.total_amount = "75"
        session.start_payment()

        tx = session.confirm_payment(succeeded=True)
        assert session.ledger.history == [tx]
        assert session.draft.total_amount == Decimal("0")
        assert audit_storage.events[-1].event_type == AuditEventType.PAYMENT_CONFIRMED

    def test_declined_payment(self, session):
        session.on_scan("friend@okbank")
        session.draft.total_amount = "75"
        session.start_payment()
        assert session.confirm_payment(succeeded=False) is None
        assert session.summary().spent == Decimal("0")
        assert session.draft.total_amount == Decimal("75")

    def test_new_month(self, session):
        session.on_scan("friend@okbank")
        session.draft.total_amount = "75"
        session.start_payment()
        session.confirm_payment(succeeded=True)
        session.start_new_month(confirmed=True)
        summary = session.summary()
        assert summary.spent == Decimal("0")
        assert summary.recent == []
        assert summary.budget == Decimal("5000")


class TestSummary:

    def test_recent_limited_by_settings(self, storage, launcher, audit_logger):
        settings = TrackerSettings(recent_history_limit=2)
        session = create_session(storage, launcher, settings, audit_logger)
        for note in ["a", "b", "c"]:
            session.ledger.record(Decimal("1"), Decimal("1"), note)
        assert [tx.note for tx in session.summary().recent] == ["c", "b"]

    def test_over_budget(self, session):
        session.ledger.record(Decimal("6000"), Decimal("6000"), "Rent")
        summary = session.summary()
        assert summary.is_over_budget is True
        assert summary.percent_used == 100
        assert summary.remaining == Decimal("-1000")


class TestStartup:
    """Tests for loading saved state."""

    def test_resumes_saved_state(self, launcher, settings):
        storage = InMemoryStateStorage(PersistedState(
            budget=Decimal("3000"),
            spent=Decimal("500"),
            transactions=[
                Transaction(id=1, full_amount=Decimal("500"), my_share=Decimal("500")),
            ],
        ))
        session = create_session(storage=storage, launcher=launcher, settings=settings)
        assert session.ledger.is_setup_done is True
        assert session.summary().remaining == Decimal("2500")

    def test_fresh_start_without_state(self, storage, launcher, settings):
        session = create_session(storage=storage, launcher=launcher, settings=settings)
        assert session.ledger.is_setup_done is False
        assert session.summary().spent == Decimal("0")

    def test_unreadable_state_starts_fresh(self, tmp_path, audit_logger, audit_storage):
        """Test a broken backend is never fatal at startup."""
        target = tmp_path / "state.json"
        target.mkdir()
        ledger = load_ledger(JsonFileStateStorage(target), audit_logger)
        assert ledger.history == []
        assert audit_storage.events[-1].event_type == AuditEventType.STATE_LOAD_FAILED

    @pytest.mark.parametrize("document", [
        '{"budget": "NaN"}',
        '{"transactions": 5}',
        '{"budget": 1e400}',
    ])
    def test_odd_state_file_starts_fresh(self, tmp_path, launcher, settings, document):
        path = tmp_path / "state.json"
        path.write_text(document, encoding="utf-8")
        session = create_session(
            storage=JsonFileStateStorage(path),
            launcher=launcher,
            settings=settings,
        )
        assert session.ledger.is_setup_done is False
        assert session.summary().spent == Decimal("0")

    def test_default_storage_uses_settings_path(self, tmp_path, launcher):
        settings = TrackerSettings(state_file=tmp_path / "data.json")
        session = create_session(launcher=launcher, settings=settings)
        session.setup_budget("1200")
        assert (tmp_path / "data.json").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
