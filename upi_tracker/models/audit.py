"""
Audit Models for UPI Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every payment from scan to ledger
2. Debugging information when a confirmation goes missing
3. A record of destructive actions such as month resets

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the scan → pay → confirm flow has its own event type.
    """
    # Scanning
    SCAN_INTERPRETED = "scan_interpreted"
    SCAN_REJECTED = "scan_rejected"

    # Payment flow
    PAYMENT_INITIATED = "payment_initiated"
    PAYMENT_LAUNCH_FAILED = "payment_launch_failed"
    PAYMENT_CONFIRMED = "payment_confirmed"
    PAYMENT_DISCARDED = "payment_discarded"

    # Ledger
    BUDGET_SET = "budget_set"
    MONTH_RESET = "month_reset"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_LOAD_FAILED = "state_load_failed"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - all events of one payment share the payment id
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.payment_initiated(payment_id, total, share)
        event = AuditEventBuilder.month_reset(cleared_count, cleared_spent)
    """

    @staticmethod
    def scan_interpreted(kind: str, payee_address: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCAN_INTERPRETED,
            description=f"Scan read as {kind}",
            details={
                "kind": kind,
                "payee_address": payee_address,
            },
            is_user_action=True,
        )

    @staticmethod
    def scan_rejected(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCAN_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Scan is not a payment link or address",
            details={
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def payment_initiated(
        payment_id: UUID,
        total_amount: Decimal,
        deducted_share: Decimal,
        uri: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_INITIATED,
            correlation_id=payment_id,
            description=f"Payment app launched for {total_amount}",
            details={
                "total_amount": str(total_amount),
                "deducted_share": str(deducted_share),
                "uri": uri,
            },
            is_user_action=True,
        )

    @staticmethod
    def payment_launch_failed(uri: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_LAUNCH_FAILED,
            severity=AuditSeverity.ERROR,
            description="Payment app could not be launched",
            error_message=error_message,
            details={
                "uri": uri,
            },
        )

    @staticmethod
    def payment_confirmed(
        payment_id: UUID,
        transaction_id: int,
        my_share: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_CONFIRMED,
            correlation_id=payment_id,
            description=f"User confirmed payment, {my_share} added to ledger",
            details={
                "transaction_id": transaction_id,
                "my_share": str(my_share),
            },
            is_user_action=True,
        )

    @staticmethod
    def payment_discarded(payment_id: UUID, total_amount: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_DISCARDED,
            correlation_id=payment_id,
            description="User reported the payment did not go through",
            details={
                "total_amount": str(total_amount),
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_set(limit: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            description=f"Monthly budget set to {limit}",
            details={
                "limit": str(limit),
            },
            is_user_action=True,
        )

    @staticmethod
    def month_reset(cleared_count: int, cleared_spent: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_RESET,
            severity=AuditSeverity.WARNING,
            description=f"New month started, {cleared_count} transactions cleared",
            details={
                "cleared_count": cleared_count,
                "cleared_spent": str(cleared_spent),
            },
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            description=f"Loaded saved state with {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def state_load_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            description="Saved state unavailable, starting fresh",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="State could not be saved, keeping it in memory",
            error_message=error_message,
        )
