"""
Pending Transaction Coordinator

The state machine between "payment app launched" and "ledger updated".

    IDLE --initiate--> AWAITING_CONFIRMATION --confirm(succeeded)--> IDLE (committed)
                                             --confirm(failed)-----> IDLE (discarded)

CRITICAL BOUNDARIES:
1. We cannot see what happened in the payment app. The user's answer
   is the only thing that moves money into the ledger.
2. There is exactly one pending slot. Initiating again before the
   user answers is rejected, so a confirmation can never be credited
   to the wrong payment.
3. Launch failure leaves everything as it was: IDLE, draft intact.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

import structlog

from upi_tracker.audit import AuditLogger
from upi_tracker.models.ledger import Transaction
from upi_tracker.models.payment import (
    CoordinatorState,
    PaymentDraft,
    PaymentOutcome,
    PendingPayment,
)
from upi_tracker.payments.errors import PaymentInProgressError, ValidationError
from upi_tracker.payments.reconciler import UriReconciler
from upi_tracker.services.launcher import LaunchError, PaymentLauncher

if TYPE_CHECKING:
    from upi_tracker.ledger import Ledger


logger = structlog.get_logger(__name__)

DEFAULT_NOTE = "Expense"


class PaymentCoordinator:
    """
    Sequences draft → launch → confirmation → ledger.

    Args:
        ledger: Where confirmed payments are recorded
        launcher: Opens the payment URI in the external app
        reconciler: Builds the outbound URI
        default_note: Note recorded when the draft had none
        prompt_delay_ms: Hint for how long the caller should wait
                         before asking the user to confirm
        audit_logger: Optional audit trail
    """

    def __init__(
        self,
        ledger: "Ledger",
        launcher: PaymentLauncher,
        reconciler: Optional[UriReconciler] = None,
        default_note: str = DEFAULT_NOTE,
        prompt_delay_ms: int = 0,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._ledger = ledger
        self._launcher = launcher
        self._reconciler = reconciler or UriReconciler()
        self._default_note = default_note
        self._prompt_delay_ms = prompt_delay_ms
        self._audit_logger = audit_logger

        self._pending: Optional[PendingPayment] = None
        self._pending_draft: Optional[PaymentDraft] = None

    @property
    def state(self) -> CoordinatorState:
        if self._pending is None:
            return CoordinatorState.IDLE
        return CoordinatorState.AWAITING_CONFIRMATION

    @property
    def is_awaiting_confirmation(self) -> bool:
        return self._pending is not None

    @property
    def pending(self) -> Optional[PendingPayment]:
        return self._pending

    @staticmethod
    def deducted_share(draft: PaymentDraft) -> Decimal:
        """What the ledger is charged: the share when splitting, else the total."""
        if draft.is_split and draft.my_share is not None:
            return draft.my_share
        return draft.total_amount

    def _validate(self, draft: PaymentDraft) -> None:
        if draft.total_amount is None or draft.total_amount <= 0:
            raise ValidationError("total_amount", "Please enter a valid Amount")
        if (
            draft.is_split
            and draft.my_share is not None
            and draft.my_share > draft.total_amount
        ):
            raise ValidationError(
                "my_share",
                "Your share cannot be more than the total bill"
            )

    def initiate(self, draft: PaymentDraft) -> PendingPayment:
        """
        Launch the payment app for a draft and wait for confirmation.

        Nothing changes unless the launch call returns normally.

        Raises:
            PaymentInProgressError: If a launched payment is unconfirmed
            ValidationError: If the draft cannot be paid
            LaunchError: If the payment app could not be opened
        """
        if self._pending is not None:
            raise PaymentInProgressError(
                "Confirm or cancel the previous payment before starting another"
            )

        self._validate(draft)
        share = self.deducted_share(draft)
        uri = self._reconciler.reconcile(draft)

        try:
            self._launcher.launch(uri)
        except Exception as e:
            logger.error("payment_launch_failed", uri=uri, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_launch_failed(uri, str(e))
            if isinstance(e, LaunchError):
                raise
            raise LaunchError(uri, f"Could not open payment app: {e}") from e

        pending = PendingPayment(
            total_amount=draft.total_amount,
            deducted_share=share,
            note=draft.note,
            uri=uri,
            prompt_delay_ms=self._prompt_delay_ms,
        )
        self._pending = pending
        self._pending_draft = draft

        if self._audit_logger:
            self._audit_logger.log_payment_initiated(
                payment_id=pending.payment_id,
                total_amount=pending.total_amount,
                deducted_share=pending.deducted_share,
                uri=uri,
            )
        return pending

    def confirm(self, outcome: PaymentOutcome) -> Optional[Transaction]:
        """
        Resolve the pending payment with the user's answer.

        Returns:
            The committed transaction, or None when discarded or idle

        Raises:
            ValueError: If the outcome is not a PaymentOutcome value; the
                        payment stays pending
        """
        pending = self._pending
        if pending is None:
            return None

        outcome = PaymentOutcome(outcome)
        draft = self._pending_draft
        self._pending = None
        self._pending_draft = None

        if outcome is PaymentOutcome.FAILED:
            if self._audit_logger:
                self._audit_logger.log_payment_discarded(
                    pending.payment_id,
                    pending.total_amount,
                )
            return None

        tx = self._ledger.record(
            full_amount=pending.total_amount,
            my_share=pending.deducted_share,
            note=pending.note or self._default_note,
        )
        if draft is not None:
            draft.clear()

        if self._audit_logger:
            self._audit_logger.log_payment_confirmed(
                payment_id=pending.payment_id,
                transaction_id=tx.id,
                my_share=tx.my_share,
            )
        return tx
