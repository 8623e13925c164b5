"""
Main Orchestrator for UPI Tracker

This module ties together all the components and defines the
end-to-end flows a UI drives:
1. Setup (load saved state → set budget)
2. Pay (scan/enter → draft → launch → confirm → ledger)
3. New month (confirm → reset)

DESIGN DECISION: The session owns the state objects explicitly
(ledger, draft, coordinator) instead of a UI holding loose globals.
Saving is an explicit step after each committing mutation, done by the
ledger, not a side effect of re-rendering.
"""

from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict

from upi_tracker.audit import AuditLogger
from upi_tracker.config import TrackerSettings, get_settings
from upi_tracker.ledger import Ledger
from upi_tracker.models.ledger import Transaction
from upi_tracker.models.payment import (
    BareAddress,
    MerchantDescriptor,
    PaymentDraft,
    PaymentOutcome,
    PendingPayment,
    ScanResult,
)
from upi_tracker.payments import (
    PaymentCoordinator,
    QrPayloadInterpreter,
    UriReconciler,
)
from upi_tracker.services.launcher import PaymentLauncher, WebBrowserLauncher
from upi_tracker.services.storage import (
    JsonFileStateStorage,
    PersistenceUnavailable,
    StateStorageInterface,
)


logger = structlog.get_logger(__name__)


class BudgetSummary(BaseModel):
    """What the dashboard shows."""
    model_config = ConfigDict(frozen=True)

    budget: Decimal
    spent: Decimal
    remaining: Decimal
    percent_used: Decimal
    is_over_budget: bool
    recent: list[Transaction]


class TrackerSession:
    """
    One user's tracking session.

    Flow:
    1. on_scan() or direct draft edits fill the draft
    2. start_payment() launches the payment app
    3. confirm_payment() records or discards it

    The ledger is NEVER touched without step 3.
    """

    def __init__(
        self,
        ledger: Ledger,
        coordinator: PaymentCoordinator,
        interpreter: Optional[QrPayloadInterpreter] = None,
        settings: Optional[TrackerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings()
        self._ledger = ledger
        self._coordinator = coordinator
        self._interpreter = interpreter or QrPayloadInterpreter(
            scheme=self._settings.uri_scheme
        )
        self._audit_logger = audit_logger
        self.draft = PaymentDraft()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def coordinator(self) -> PaymentCoordinator:
        return self._coordinator

    def setup_budget(self, limit: Decimal) -> None:
        """First-run setup; also used when the user changes the budget."""
        self._ledger.set_budget(limit)

    def on_scan(self, text: Optional[str]) -> ScanResult:
        """
        Handle one decoded QR payload.

        Invalid scans leave the draft untouched; the UI should offer a
        re-scan or manual entry.
        """
        result = self._interpreter.interpret(text)

        if self._audit_logger:
            if isinstance(result, MerchantDescriptor):
                self._audit_logger.log_scan_interpreted("merchant", result.payee_address)
            elif isinstance(result, BareAddress):
                self._audit_logger.log_scan_interpreted("address", result.address)
            else:
                self._audit_logger.log_scan_rejected(result.reason)

        self.draft.apply_scan(result)
        return result

    def start_payment(self) -> PendingPayment:
        """Launch the payment app for the current draft."""
        return self._coordinator.initiate(self.draft)

    def confirm_payment(self, succeeded: bool) -> Optional[Transaction]:
        """Record the user's answer to "did the payment go through?"."""
        outcome = PaymentOutcome.SUCCEEDED if succeeded else PaymentOutcome.FAILED
        return self._coordinator.confirm(outcome)

    def start_new_month(self, confirmed: bool) -> None:
        self._ledger.reset_month(confirmed=confirmed)

    def summary(self) -> BudgetSummary:
        budget = self._ledger.budget
        return BudgetSummary(
            budget=budget.limit if budget else Decimal("0"),
            spent=self._ledger.spent,
            remaining=self._ledger.budget_remaining(),
            percent_used=self._ledger.percent_used(),
            is_over_budget=self._ledger.is_over_budget(),
            recent=self._ledger.recent(self._settings.recent_history_limit),
        )


def load_ledger(
    storage: StateStorageInterface,
    audit_logger: Optional[AuditLogger] = None,
) -> Ledger:
    """
    Load the ledger from storage.

    Missing or unreadable state starts a fresh ledger; it is never fatal.
    """
    try:
        state = storage.load()
    except PersistenceUnavailable as e:
        logger.warning("state_load_failed", error=str(e))
        if audit_logger:
            audit_logger.log_state_load_failed(str(e))
        state = None

    ledger = Ledger.from_state(state, gateway=storage, audit_logger=audit_logger)
    if state is not None and audit_logger:
        audit_logger.log_state_loaded(len(ledger.history))
    return ledger


def create_session(
    storage: Optional[StateStorageInterface] = None,
    launcher: Optional[PaymentLauncher] = None,
    settings: Optional[TrackerSettings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> TrackerSession:
    """
    Factory function to create all session components.

    Args:
        storage: State backend. Defaults to the JSON file from settings.
        launcher: Payment app launcher. Defaults to the system handler.
        settings: Defaults to the cached environment settings.
        audit_logger: Defaults to a local-only audit logger.

    Returns:
        A ready TrackerSession
    """
    settings = settings or get_settings()
    audit_logger = audit_logger or AuditLogger()

    if storage is None:
        storage = JsonFileStateStorage(
            settings.state_file,
            retry_attempts=settings.save_retry_attempts,
        )

    ledger = load_ledger(storage, audit_logger)

    coordinator = PaymentCoordinator(
        ledger=ledger,
        launcher=launcher or WebBrowserLauncher(),
        reconciler=UriReconciler(
            scheme=settings.uri_scheme,
            currency=settings.currency_code,
        ),
        default_note=settings.default_note,
        prompt_delay_ms=settings.confirm_prompt_delay_ms,
        audit_logger=audit_logger,
    )

    return TrackerSession(
        ledger=ledger,
        coordinator=coordinator,
        settings=settings,
        audit_logger=audit_logger,
    )
