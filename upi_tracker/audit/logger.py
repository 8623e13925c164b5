"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability from scan to ledger entry
2. Debugging capability when a confirmation goes missing
3. A history of destructive actions (month resets)

The audit logger:
- Gracefully handles failures (never crashes the app if logging fails)
- Supports correlation IDs to trace all events of one payment
"""

from typing import Optional
from uuid import UUID

import structlog

from upi_tracker.models.audit import AuditEvent, AuditEventBuilder
from upi_tracker.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional audit store (for user-visible history)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_scan_interpreted(self, kind: str, payee_address: str) -> None:
        self.log(AuditEventBuilder.scan_interpreted(kind, payee_address))

    def log_scan_rejected(self, reason: str) -> None:
        self.log(AuditEventBuilder.scan_rejected(reason))

    def log_payment_initiated(
        self,
        payment_id: UUID,
        total_amount,
        deducted_share,
        uri: str,
    ) -> None:
        """Log that the payment app was launched."""
        self.log(AuditEventBuilder.payment_initiated(
            payment_id=payment_id,
            total_amount=total_amount,
            deducted_share=deducted_share,
            uri=uri,
        ))

    def log_launch_failed(self, uri: str, error_message: str) -> None:
        self.log(AuditEventBuilder.payment_launch_failed(uri, error_message))

    def log_payment_confirmed(
        self,
        payment_id: UUID,
        transaction_id: int,
        my_share,
    ) -> None:
        """Log user confirmation of a launched payment."""
        self.log(AuditEventBuilder.payment_confirmed(
            payment_id=payment_id,
            transaction_id=transaction_id,
            my_share=my_share,
        ))

    def log_payment_discarded(self, payment_id: UUID, total_amount) -> None:
        self.log(AuditEventBuilder.payment_discarded(payment_id, total_amount))

    def log_budget_set(self, limit) -> None:
        self.log(AuditEventBuilder.budget_set(limit))

    def log_month_reset(self, cleared_count: int, cleared_spent) -> None:
        self.log(AuditEventBuilder.month_reset(cleared_count, cleared_spent))

    def log_state_loaded(self, transaction_count: int) -> None:
        self.log(AuditEventBuilder.state_loaded(transaction_count))

    def log_state_load_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.state_load_failed(error_message))

    def log_save_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(error_message))
