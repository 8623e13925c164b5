"""
URI Reconciler

Builds the exact outbound payment URI for a draft.

DESIGN DECISION: The URI is rebuilt from a parameter dictionary, never
patched with string substitution. Substitution on the raw scan text
breaks on encoded values and on keys that merely contain "am".

Override precedence:
1. `am` is always the FULL bill amount with exactly two decimals.
   The split share only affects the ledger, never what is charged.
2. Scanned merchant (same payee as the draft): every scanned parameter
   is kept in its original order, `am`/`cu` are dropped and appended last.
3. Anything else: exactly pa, am, cu and, if there is a note, tn.

Reconciliation is a pure function of the draft.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from urllib.parse import quote

from upi_tracker.config import get_settings
from upi_tracker.models.payment import (
    AMOUNT_KEY,
    CURRENCY_KEY,
    NOTE_KEY,
    PAYEE_ADDRESS_KEY,
    PaymentDraft,
)
from upi_tracker.payments.errors import ValidationError


TWO_PLACES = Decimal("0.01")

# Same set encodeURIComponent leaves alone, plus '@' so payee
# addresses stay readable.
_SAFE_CHARS = "@!*'()"


def format_amount(amount: Decimal) -> str:
    """
    Format an amount as fixed-point with exactly two decimals.

    Never produces scientific notation (Decimal('1E+3') -> '1000.00').
    """
    try:
        quantized = Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError("total_amount", f"Amount is out of range: {amount}")
    return format(quantized, "f")


def encode_component(value: str) -> str:
    """Percent-encode a query key or value."""
    return quote(value, safe=_SAFE_CHARS)


def build_query(parameters: dict[str, str]) -> str:
    return "&".join(
        f"{encode_component(key)}={encode_component(value)}"
        for key, value in parameters.items()
    )


class UriReconciler:
    """
    Produces outbound payment URIs.

    Args:
        scheme: Deep-link scheme (without '://')
        currency: The single supported currency code
    """

    def __init__(self, scheme: str = "upi", currency: str = "INR"):
        self._scheme = scheme
        self._currency = currency

    @property
    def currency(self) -> str:
        return self._currency

    def _validate(self, draft: PaymentDraft) -> str:
        """Check the draft can be paid; returns the formatted amount."""
        if not draft.payee_address:
            raise ValidationError(
                "payee_address",
                "Please enter or scan a UPI ID to pay"
            )
        if draft.total_amount is None or draft.total_amount <= 0:
            raise ValidationError("total_amount", "Please enter a valid Amount")

        amount = format_amount(draft.total_amount)
        if Decimal(amount) <= 0:
            raise ValidationError(
                "total_amount",
                f"Amount {draft.total_amount} rounds to zero"
            )
        return amount

    def uses_merchant_parameters(self, draft: PaymentDraft) -> bool:
        """True when the scanned merchant parameters apply to this draft."""
        return (
            draft.merchant is not None
            and draft.merchant.payee_address == draft.payee_address
        )

    def build_parameters(self, draft: PaymentDraft) -> dict[str, str]:
        """
        Ordered outbound parameters for a draft.

        Raises:
            ValidationError: If the amount or payee is missing
        """
        amount = self._validate(draft)

        if self.uses_merchant_parameters(draft):
            # Copy; the descriptor's own mapping is never touched
            parameters = {
                key: value
                for key, value in draft.merchant.parameters.items()
                if key not in (AMOUNT_KEY, CURRENCY_KEY)
            }
            parameters[AMOUNT_KEY] = amount
            parameters[CURRENCY_KEY] = self._currency
            return parameters

        parameters = {
            PAYEE_ADDRESS_KEY: draft.payee_address,
            AMOUNT_KEY: amount,
            CURRENCY_KEY: self._currency,
        }
        if draft.note:
            parameters[NOTE_KEY] = draft.note
        return parameters

    def reconcile(self, draft: PaymentDraft) -> str:
        """
        Build the outbound URI for a draft.

        Raises:
            ValidationError: If the amount or payee is missing
        """
        query = build_query(self.build_parameters(draft))
        return f"{self._scheme}://pay?{query}"


def reconcile(draft: PaymentDraft) -> str:
    """Reconcile with the configured scheme and currency."""
    settings = get_settings()
    return UriReconciler(
        scheme=settings.uri_scheme,
        currency=settings.currency_code,
    ).reconcile(draft)
