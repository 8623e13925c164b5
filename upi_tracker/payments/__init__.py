"""Payment flow package: scan interpretation, URI building, confirmation."""

from upi_tracker.payments.errors import (
    ParseError,
    PaymentError,
    PaymentInProgressError,
    ValidationError,
)
from upi_tracker.payments.interpreter import (
    QrPayloadInterpreter,
    interpret,
    parse_payment_uri,
)
from upi_tracker.payments.reconciler import (
    UriReconciler,
    format_amount,
    reconcile,
)
from upi_tracker.payments.coordinator import PaymentCoordinator

__all__ = [
    # Errors
    "ParseError",
    "PaymentError",
    "PaymentInProgressError",
    "ValidationError",
    # Interpreter
    "QrPayloadInterpreter",
    "interpret",
    "parse_payment_uri",
    # Reconciler
    "UriReconciler",
    "format_amount",
    "reconcile",
    # Coordinator
    "PaymentCoordinator",
]
