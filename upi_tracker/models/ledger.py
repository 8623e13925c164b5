"""
Ledger Models for UPI Tracker

Budget, committed transactions, and the JSON projection written to disk.

DESIGN DECISION: Money is Decimal everywhere in memory. The persisted
file uses plain JSON numbers so older files written by the web version
of the tracker load unchanged.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
)


# Date formats seen in older state files ("toLocaleDateString" output)
LEGACY_DATE_FORMATS = ["%m/%d/%Y", "%d/%m/%Y", "%Y-%m-%d"]


def decimal_to_number(value: Decimal) -> Union[int, float]:
    """Render a Decimal as a JSON number (int when it has no fraction)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class BudgetConfig(BaseModel):
    """The monthly spending limit."""
    model_config = ConfigDict(frozen=True)

    limit: Decimal = Field(
        ...,
        gt=0,
        description="Monthly budget in the configured currency"
    )


class Transaction(BaseModel):
    """
    A committed expense.

    `is_split` is derived, never supplied: a transaction is split exactly
    when the ledger was charged less (or more) than the full bill.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., ge=0)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="date",
    )
    full_amount: Decimal = Field(..., ge=0, alias="fullAmount")
    my_share: Decimal = Field(..., ge=0, alias="myShare")
    note: str = ""

    @computed_field(alias="isSplit")
    @property
    def is_split(self) -> bool:
        return self.full_amount != self.my_share

    @field_validator('timestamp', mode='before')
    @classmethod
    def parse_legacy_date(cls, v: Any) -> Any:
        """Accept the locale date strings older files contain."""
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v)
            except ValueError:
                pass
            for fmt in LEGACY_DATE_FORMATS:
                try:
                    return datetime.strptime(v, fmt)
                except ValueError:
                    continue
        return v

    @field_validator('timestamp')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Dates without an offset (older files) are taken as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_serializer('full_amount', 'my_share')
    def serialize_amount(self, value: Decimal) -> Union[int, float]:
        return decimal_to_number(value)


class PersistedState(BaseModel):
    """
    Everything that survives a restart: {budget, spent, transactions}.

    `spent` is written for compatibility only. On load the ledger
    recomputes it from the transactions.
    """
    model_config = ConfigDict(populate_by_name=True)

    budget: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="0 means the budget has not been set up yet"
    )
    spent: Decimal = Decimal("0")
    transactions: list[Transaction] = Field(default_factory=list)

    @field_serializer('budget', 'spent')
    def serialize_totals(self, value: Decimal) -> Union[int, float]:
        return decimal_to_number(value)

    def to_json_dict(self) -> dict:
        """JSON-compatible dict in the on-disk key layout."""
        return self.model_dump(mode="json", by_alias=True)
