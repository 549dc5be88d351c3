"""
Form Models

Raw input exactly as the user typed it: every value is a string, nothing
is trusted yet. FormValidator turns these into typed records.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


def _today_iso() -> str:
    return date.today().isoformat()


def _today_day() -> str:
    return str(date.today().day)


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class TransactionForm(_Form):
    """Add/edit transaction form. An empty amount owed means nothing is owed."""

    date: str = Field(default_factory=_today_iso)
    description: str = ""
    original_amount: str = ""
    amount_owed: str = "0"
    type: str = "expense"
    category: str = "Other"
    owed_by: str = ""


class IncomeForm(_Form):
    """Income for the month currently selected."""

    source: str = ""
    amount: str = ""
    description: str = ""


class RecurringPaymentForm(_Form):
    """An empty end date means the payment never ends."""

    description: str = ""
    amount: str = ""
    start_date: str = Field(default_factory=_today_iso)
    end_date: str = ""
    frequency: str = "monthly"
    day_of_month: str = Field(default_factory=_today_day)


class SavingsForm(_Form):
    """Savings for the month currently selected."""

    amount: str = ""
    description: str = ""
