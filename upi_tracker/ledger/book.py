"""
Expense Ledger

Append-only record of confirmed expenses for the current month, plus the
budget they are measured against.

GUARANTEES:
- `spent` is always exactly the sum of `my_share` over the history;
  it is derived on read and never stored on its own
- History is most-recent-first
- Every committing mutation (append, reset, budget) triggers a save
- A failed save never undoes the mutation; memory stays authoritative
"""

import time
from decimal import Decimal
from typing import Optional

import structlog

from upi_tracker.audit import AuditLogger
from upi_tracker.models.ledger import BudgetConfig, PersistedState, Transaction
from upi_tracker.payments.errors import ValidationError
from upi_tracker.services.storage import StateStorageInterface


logger = structlog.get_logger(__name__)

HUNDRED = Decimal("100")


class Ledger:
    """
    The month's committed transactions and budget.

    Args:
        budget: Monthly limit, None until the user sets one up
        history: Existing transactions, most recent first
        gateway: Where to save after each mutation. None keeps state in memory only
        audit_logger: Optional audit trail
    """

    def __init__(
        self,
        budget: Optional[BudgetConfig] = None,
        history: Optional[list[Transaction]] = None,
        gateway: Optional[StateStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._budget = budget
        self._history: list[Transaction] = list(history or [])
        self._gateway = gateway
        self._audit_logger = audit_logger
        self._last_id = max((tx.id for tx in self._history), default=0)

    # -------------------------------------------------------------------------
    # Loading / projection
    # -------------------------------------------------------------------------

    @classmethod
    def from_state(
        cls,
        state: Optional[PersistedState],
        gateway: Optional[StateStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "Ledger":
        """
        Rebuild a ledger from persisted state.

        The stored `spent` is only checked, never trusted: the ledger
        recomputes it from the transactions.
        """
        if state is None:
            return cls(gateway=gateway, audit_logger=audit_logger)

        budget = BudgetConfig(limit=state.budget) if state.budget > 0 else None
        history = sorted(state.transactions, key=lambda tx: tx.id, reverse=True)
        ledger = cls(
            budget=budget,
            history=history,
            gateway=gateway,
            audit_logger=audit_logger,
        )

        if ledger.spent != state.spent:
            logger.warning(
                "stored_spent_mismatch",
                stored=str(state.spent),
                recomputed=str(ledger.spent),
            )
        return ledger

    def to_state(self) -> PersistedState:
        return PersistedState(
            budget=self._budget.limit if self._budget else Decimal("0"),
            spent=self.spent,
            transactions=list(self._history),
        )

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def budget(self) -> Optional[BudgetConfig]:
        return self._budget

    @property
    def history(self) -> list[Transaction]:
        """Copy of the history, most recent first."""
        return list(self._history)

    @property
    def spent(self) -> Decimal:
        return sum((tx.my_share for tx in self._history), Decimal("0"))

    @property
    def is_setup_done(self) -> bool:
        return self._budget is not None

    def budget_remaining(self) -> Decimal:
        """Budget left; negative when over budget."""
        limit = self._budget.limit if self._budget else Decimal("0")
        return limit - self.spent

    def percent_used(self) -> Decimal:
        """Share of the budget used, capped at 100. Zero without a budget."""
        if self._budget is None or self._budget.limit == 0:
            return Decimal("0")
        return min(self.spent / self._budget.limit * HUNDRED, HUNDRED)

    def is_over_budget(self) -> bool:
        return self.percent_used() >= HUNDRED

    def recent(self, limit: int = 5) -> list[Transaction]:
        return self._history[:limit]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def next_transaction_id(self) -> int:
        """Millisecond clock, bumped so ids strictly increase."""
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        self._last_id = candidate
        return candidate

    def append(self, tx: Transaction) -> None:
        """Add a committed transaction at the head of the history."""
        self._history.insert(0, tx)
        self._last_id = max(self._last_id, tx.id)
        self._save()

    def record(
        self,
        full_amount: Decimal,
        my_share: Decimal,
        note: str,
    ) -> Transaction:
        """Create a transaction with the next id and append it."""
        tx = Transaction(
            id=self.next_transaction_id(),
            full_amount=full_amount,
            my_share=my_share,
            note=note,
        )
        self.append(tx)
        return tx

    def set_budget(self, limit: Decimal) -> BudgetConfig:
        """
        Set the monthly budget.

        Raises:
            ValidationError: If the limit is not a positive amount
        """
        try:
            limit = Decimal(str(limit))
        except ArithmeticError:
            raise ValidationError("budget", f"Invalid budget: {limit!r}")
        if not limit.is_finite() or limit <= 0:
            raise ValidationError("budget", "Budget must be greater than zero")

        self._budget = BudgetConfig(limit=limit)
        if self._audit_logger:
            self._audit_logger.log_budget_set(limit)
        self._save()
        return self._budget

    def reset_month(self, confirmed: bool = False) -> None:
        """
        Start a new month: clear history and spending, keep the budget.

        Destructive and irreversible, so the caller must pass confirmed=True
        after asking the user.

        Raises:
            ValidationError: If not confirmed
        """
        if not confirmed:
            raise ValidationError(
                "confirmed",
                "Starting a new month erases this month's history; confirm first"
            )

        cleared_count = len(self._history)
        cleared_spent = self.spent
        self._history = []

        if self._audit_logger:
            self._audit_logger.log_month_reset(cleared_count, cleared_spent)
        self._save()

    def _save(self) -> None:
        """Best-effort save; failures are logged and swallowed."""
        if self._gateway is None:
            return
        try:
            self._gateway.save(self.to_state())
        except Exception as e:
            logger.error(
                "ledger_save_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            if self._audit_logger:
                self._audit_logger.log_save_failed(str(e))
