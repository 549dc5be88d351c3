"""
Core Record Models for Finance Tracker

These models define the four kinds of record the tracker keeps:
transactions, income streams, recurring payments and savings.

They are designed to:
1. Keep money exact (Decimal, two decimal places, never float)
2. Serialize with the camelCase field names of the persisted documents
3. Recompute derived values instead of trusting stored ones

Records are frozen: a change is a new record replacing the old one in
the store, never an in-place edit.

DESIGN DECISION: A record's ``id`` is None until the record store assigns
one. Forms and validators build records without identifiers; only the
store decides identity.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel


# Stored end date of a recurring payment that has no end
OPEN_ENDED_DATE = dt.date(2099, 12, 31)

MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

DEFAULT_CATEGORIES = (
    "Food",
    "Transport",
    "Housing",
    "Entertainment",
    "Utilities",
    "Other",
)


def _coerce_money(value: Any) -> Any:
    """Convert floats through their shortest repr so 12.3 stays 12.3."""
    if isinstance(value, float):
        return Decimal(repr(value))
    return value


Money = Annotated[
    Decimal,
    BeforeValidator(_coerce_money),
    Field(ge=0, decimal_places=2),
]

MonthKey = Annotated[str, Field(pattern=MONTH_KEY_PATTERN)]


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a transaction.

    Only expenses feed the monthly totals. Income-typed transactions are
    listed with the month's transactions but are not counted as income;
    income comes from income streams.
    """
    EXPENSE = "expense"
    INCOME = "income"


class Frequency(str, Enum):
    """How often a recurring payment repeats."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# RECORDS
# =============================================================================

class Record(BaseModel):
    """Base for every stored record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    id: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Opaque identifier assigned by the record store"
    )


class Transaction(Record):
    """
    A single dated expense or income.

    ``final_amount`` is what the transaction really cost: the original
    amount less whatever a third party owes back. It is always derived and
    any stored value is ignored on load.
    """

    date: dt.date = Field(
        ...,
        description="Calendar day of the transaction"
    )
    description: str
    original_amount: Money = Field(
        ...,
        description="Amount paid"
    )
    amount_owed: Money = Field(
        default=Decimal("0"),
        description="Part of the amount someone owes back"
    )
    type: TransactionType = TransactionType.EXPENSE
    category: str = "Other"
    owed_by: Optional[str] = Field(
        default=None,
        description="Who owes the amount back"
    )

    @field_validator("owed_by", mode="before")
    @classmethod
    def blank_owed_by_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @computed_field(alias="finalAmount")
    @property
    def final_amount(self) -> Decimal:
        return self.original_amount - self.amount_owed

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class IncomeStream(Record):
    """Income received in a month. Several entries per month are summed."""

    month: MonthKey
    source: str
    amount: Money
    description: str = ""


class RecurringPayment(Record):
    """
    A rule for a repeating payment.

    This is a rule, not a list of occurrences: nothing is materialized
    per occurrence. A payment without an end date stores OPEN_ENDED_DATE.
    """

    description: str
    amount: Money
    start_date: dt.date
    end_date: dt.date = Field(
        default=OPEN_ENDED_DATE,
        description="Last date the rule applies; OPEN_ENDED_DATE when unset"
    )
    frequency: Frequency = Frequency.MONTHLY
    day_of_month: Optional[int] = Field(
        default=None,
        ge=1,
        le=31,
        description="Payment day, only meaningful for monthly payments"
    )

    @field_validator("end_date", mode="before")
    @classmethod
    def missing_end_date_is_open_ended(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return OPEN_ENDED_DATE
        return v

    @property
    def is_open_ended(self) -> bool:
        return self.end_date >= OPEN_ENDED_DATE


class Savings(Record):
    """Money set aside in a month. At most one entry exists per month."""

    month: MonthKey
    amount: Money
    description: str = ""
