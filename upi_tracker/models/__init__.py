"""
Data Models Package

This package contains all Pydantic models used in the UPI Tracker.
All data flowing through the system must conform to these schemas.
"""

from upi_tracker.models.payment import (
    AMOUNT_KEY,
    CURRENCY_KEY,
    NOTE_KEY,
    PAYEE_ADDRESS_KEY,
    PAYEE_NAME_KEY,
    BareAddress,
    CoordinatorState,
    InvalidPayload,
    MerchantDescriptor,
    PaymentDraft,
    PaymentOutcome,
    PendingPayment,
    ScanResult,
)
from upi_tracker.models.ledger import (
    BudgetConfig,
    PersistedState,
    Transaction,
    decimal_to_number,
)
from upi_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # URI parameter names
    "AMOUNT_KEY",
    "CURRENCY_KEY",
    "NOTE_KEY",
    "PAYEE_ADDRESS_KEY",
    "PAYEE_NAME_KEY",
    # Payment models
    "BareAddress",
    "CoordinatorState",
    "InvalidPayload",
    "MerchantDescriptor",
    "PaymentDraft",
    "PaymentOutcome",
    "PendingPayment",
    "ScanResult",
    # Ledger models
    "BudgetConfig",
    "PersistedState",
    "Transaction",
    "decimal_to_number",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
