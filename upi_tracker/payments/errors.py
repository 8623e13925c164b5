"""Payment flow exceptions."""


class PaymentError(Exception):
    """Base exception for the payment flow."""
    pass


class ValidationError(PaymentError):
    """
    Invalid user input: missing amount or payee, bad share, bad budget.

    Raised before any state changes, so the user can fix and retry.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class ParseError(PaymentError):
    """Scanned text is not a payment link the interpreter understands."""
    pass


class PaymentInProgressError(PaymentError):
    """A launched payment is still waiting for the user's confirmation."""
    pass
