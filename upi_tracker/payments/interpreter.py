"""
QR Payload Interpreter

Turns the text a QR decoder produced into one of:
- MerchantDescriptor: a full `upi://pay?...` link
- BareAddress: just a payee address such as `friend@okbank`
- InvalidPayload: anything else

CRITICAL: The interpreter knows nothing about amounts and never decides
which merchant parameters matter. Merchant QR codes carry codes we do not
understand (mc, tr, mode, sign, ...) and every one of them must survive
untouched until the outbound link is built.

Interpretation is pure and never raises for bad input.
"""

from typing import Optional
from urllib.parse import unquote, urlsplit

from upi_tracker.models.payment import (
    PAYEE_ADDRESS_KEY,
    PAYEE_NAME_KEY,
    BareAddress,
    InvalidPayload,
    MerchantDescriptor,
    ScanResult,
)
from upi_tracker.payments.errors import ParseError


DEFAULT_SCHEME = "upi"


def split_query(query: str) -> dict[str, str]:
    """
    Split a raw query string into decoded parameters.

    Only percent-escapes are decoded. A literal '+' stays a '+' because
    signed merchant values (base64 `sign=`) use it as data.
    """
    parameters: dict[str, str] = {}
    for piece in query.split("&"):
        if not piece:
            continue
        key, _, value = piece.partition("=")
        parameters[unquote(key)] = unquote(value)
    return parameters


class QrPayloadInterpreter:
    """
    Classifies and parses decoded scan text.

    Args:
        scheme: Deep-link scheme of payment URIs (without '://')
    """

    def __init__(self, scheme: str = DEFAULT_SCHEME):
        self._scheme = scheme.lower()
        self._prefix = f"{self._scheme}://"

    def is_payment_uri(self, text: str) -> bool:
        return text.lower().startswith(self._prefix)

    def parse_payment_uri(self, text: str) -> MerchantDescriptor:
        """
        Parse a payment URI into a merchant descriptor.

        Parameters keep their scan order. A repeated key keeps its first
        position and its last value.

        Raises:
            ParseError: If the text is not a payment URI or has no payee
        """
        text = text.strip()
        if not self.is_payment_uri(text):
            raise ParseError(f"Not a {self._scheme}:// payment link")

        try:
            parts = urlsplit(text)
        except ValueError as e:
            raise ParseError(f"Malformed payment link: {e}")

        parameters = split_query(parts.query)

        payee_address = parameters.get(PAYEE_ADDRESS_KEY, "")
        if not payee_address:
            raise ParseError("Payment link has no payee address (pa)")

        display_name = parameters.get(PAYEE_NAME_KEY) or None

        return MerchantDescriptor(
            payee_address=payee_address,
            display_name=display_name,
            parameters=parameters,
        )

    def interpret(self, text: Optional[str]) -> ScanResult:
        """
        Classify scanned text.

        Returns:
            MerchantDescriptor, BareAddress or InvalidPayload
        """
        if text is None:
            return InvalidPayload(text="", reason="Nothing was scanned")

        stripped = text.strip()
        if not stripped:
            return InvalidPayload(text=text, reason="Nothing was scanned")

        if self.is_payment_uri(stripped):
            try:
                return self.parse_payment_uri(stripped)
            except ParseError as e:
                return InvalidPayload(text=text, reason=str(e))

        if "@" in stripped:
            return BareAddress(address=stripped)

        return InvalidPayload(
            text=text,
            reason="Not a UPI payment link or payee address",
        )


_default_interpreter = QrPayloadInterpreter()


def interpret(text: Optional[str]) -> ScanResult:
    """Interpret scan text using the default `upi://` scheme."""
    return _default_interpreter.interpret(text)


def parse_payment_uri(text: str) -> MerchantDescriptor:
    """Raising variant of `interpret` for payment links only."""
    return _default_interpreter.parse_payment_uri(text)
