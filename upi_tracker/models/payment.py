"""
Payment Models for UPI Tracker

These models describe everything on the "pay" side of the system:
what a QR scan turned into, what the user is about to pay, and the
payment that has been handed to the external app but not yet confirmed.

DESIGN DECISION: Scan results are three distinct types instead of one
model with optional fields. The caller has to handle "merchant",
"bare address" and "invalid" separately, and the invalid case can never
be mistaken for an empty merchant.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# Query parameter names of the UPI deep-link format
PAYEE_ADDRESS_KEY = "pa"
PAYEE_NAME_KEY = "pn"
AMOUNT_KEY = "am"
CURRENCY_KEY = "cu"
NOTE_KEY = "tn"


# =============================================================================
# ENUMS
# =============================================================================

class PaymentOutcome(str, Enum):
    """
    What the user reports after returning from the payment app.

    CRITICAL: This is the ONLY signal we get. The payment app never
    reports back to us.
    """
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CoordinatorState(str, Enum):
    """States of the pending-payment state machine."""
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


# =============================================================================
# SCAN RESULTS
# =============================================================================

class MerchantDescriptor(BaseModel):
    """
    A scanned merchant payment payload.

    `parameters` holds every key/value pair from the scan in its original
    order, amount and currency included. Nothing in here is interpreted
    beyond the payee address and display name.
    """
    model_config = ConfigDict(frozen=True)

    payee_address: str = Field(
        ...,
        min_length=1,
        description="Payee virtual payment address (the 'pa' parameter)"
    )
    display_name: Optional[str] = Field(
        default=None,
        description="Payee display name (the 'pn' parameter)"
    )
    parameters: dict[str, str] = Field(
        default_factory=dict,
        description="All scanned parameters, in scan order"
    )

    @model_validator(mode='after')
    def validate_payee_parameter(self) -> 'MerchantDescriptor':
        """The parameter set must carry the same payee under 'pa'."""
        if self.parameters and self.parameters.get(PAYEE_ADDRESS_KEY) != self.payee_address:
            raise ValueError(
                "Merchant parameters must contain the payee address under 'pa'"
            )
        return self


class BareAddress(BaseModel):
    """A scan that was just a payee address, e.g. 'friend@okbank'."""
    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1)


class InvalidPayload(BaseModel):
    """A scan that is neither a payment link nor an address."""
    model_config = ConfigDict(frozen=True)

    text: str
    reason: str


ScanResult = Union[MerchantDescriptor, BareAddress, InvalidPayload]


# =============================================================================
# DRAFT
# =============================================================================

class PaymentDraft(BaseModel):
    """
    The payment the user is filling in.

    Owned by the session, handed to the coordinator when the user taps pay.
    Amounts are validated on assignment so a form can write raw strings.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    payee_address: str = ""
    total_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Full bill amount, this is what the payment app charges"
    )
    my_share: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Portion charged to this ledger when splitting"
    )
    is_split: bool = False
    note: str = ""
    merchant: Optional[MerchantDescriptor] = None

    def set_payee_address(self, address: str) -> None:
        """
        Manual edit of the payee.

        Merchant parameters belong to the scanned payee only, so a
        different address drops them.
        """
        address = address.strip()
        if self.merchant is not None and self.merchant.payee_address != address:
            self.merchant = None
        self.payee_address = address

    def apply_scan(self, result: ScanResult) -> bool:
        """
        Fill the draft from a scan result.

        Returns True if the draft changed.
        """
        if isinstance(result, MerchantDescriptor):
            self.merchant = result
            self.payee_address = result.payee_address
            if not self.note and result.display_name:
                self.note = result.display_name
            return True
        if isinstance(result, BareAddress):
            self.merchant = None
            self.payee_address = result.address
            return True
        return False

    def toggle_split(self) -> None:
        """Flip split mode; turning it off forgets the share."""
        self.is_split = not self.is_split
        if not self.is_split:
            self.my_share = None

    def clear(self) -> None:
        """Reset the form after a committed payment."""
        self.payee_address = ""
        self.total_amount = Decimal("0")
        self.my_share = None
        self.is_split = False
        self.note = ""
        self.merchant = None


# =============================================================================
# PENDING PAYMENT
# =============================================================================

class PendingPayment(BaseModel):
    """
    A payment handed to the external app, outcome unknown.

    Created on launch, consumed exactly once by a confirmation.
    """
    model_config = ConfigDict(frozen=True)

    payment_id: UUID = Field(
        default_factory=uuid4,
        description="Correlates every audit event of this payment"
    )
    total_amount: Decimal = Field(..., gt=0)
    deducted_share: Decimal = Field(..., ge=0)
    note: str = ""
    uri: str = Field(..., min_length=1)
    initiated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    prompt_delay_ms: int = Field(
        default=0,
        ge=0,
        description="Hint: wait this long before asking the user to confirm"
    )

    @property
    def is_split(self) -> bool:
        return self.total_amount != self.deducted_share
