"""
Monthly Aggregation

DESIGN DECISION: Aggregation is a pure function of (store contents, month).
It reads the containers, never mutates them, and keeps no state between
calls, so calling it twice with the same inputs gives the same summary.

Membership rules:
- Transactions: the transaction's date falls in the month (day ignored).
- Income streams and savings: their month key equals the month.
- Recurring payments: active when the rule started on or before the first
  day of the month and has not ended before it. Frequency and day of month
  do not matter; an active payment counts its amount once per month.

Totals are Decimal sums; formatting for display happens afterwards.
"""

from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.aggregation.months import first_day_of_month, month_key_of
from finance_tracker.models.records import (
    IncomeStream,
    RecurringPayment,
    Savings,
    Transaction,
)
from finance_tracker.store import RecordStore


_ZERO = Decimal("0")


class MonthlySummary(BaseModel):
    """Records relevant to one month and the totals derived from them."""

    model_config = ConfigDict(frozen=True)

    month: str

    transactions: tuple[Transaction, ...] = ()
    income_streams: tuple[IncomeStream, ...] = ()
    recurring_payments: tuple[RecurringPayment, ...] = ()
    savings: Optional[Savings] = None

    total_income: Decimal = Field(default=_ZERO)
    total_expenses: Decimal = Field(default=_ZERO)
    recurring_expenses: Decimal = Field(default=_ZERO)
    total_savings: Decimal = Field(default=_ZERO)
    balance: Decimal = Field(default=_ZERO)

    def recent_transactions(self, limit: int = 5) -> tuple[Transaction, ...]:
        """The first ``limit`` transactions of the month, in store order."""
        return self.transactions[:limit]


def transactions_for_month(
    transactions: Iterable[Transaction],
    month: str,
) -> list[Transaction]:
    return [t for t in transactions if month_key_of(t.date) == month]


def income_for_month(
    income_streams: Iterable[IncomeStream],
    month: str,
) -> list[IncomeStream]:
    return [i for i in income_streams if i.month == month]


def savings_for_month(
    savings: Iterable[Savings],
    month: str,
) -> Optional[Savings]:
    return next((s for s in savings if s.month == month), None)


def is_active_in_month(payment: RecurringPayment, month: str) -> bool:
    """Coarse month-level activity test; occurrences are not computed."""
    first_day = first_day_of_month(month)
    return payment.start_date <= first_day <= payment.end_date


def active_recurring_payments(
    payments: Iterable[RecurringPayment],
    month: str,
) -> list[RecurringPayment]:
    return [p for p in payments if is_active_in_month(p, month)]


def summarize(
    transactions: Iterable[Transaction],
    income_streams: Iterable[IncomeStream],
    recurring_payments: Iterable[RecurringPayment],
    savings: Iterable[Savings],
    month: str,
) -> MonthlySummary:
    """
    Filter each container to ``month`` and compute the totals.

    Income-typed transactions are listed but feed no total.
    """
    first_day_of_month(month)  # rejects malformed keys
    month_transactions = transactions_for_month(transactions, month)
    month_income = income_for_month(income_streams, month)
    month_recurring = active_recurring_payments(recurring_payments, month)
    month_savings = savings_for_month(savings, month)

    total_income = sum((i.amount for i in month_income), _ZERO)
    total_expenses = sum(
        (t.final_amount for t in month_transactions if t.is_expense),
        _ZERO,
    )
    recurring_expenses = sum((p.amount for p in month_recurring), _ZERO)
    total_savings = month_savings.amount if month_savings else _ZERO

    return MonthlySummary(
        month=month,
        transactions=tuple(month_transactions),
        income_streams=tuple(month_income),
        recurring_payments=tuple(month_recurring),
        savings=month_savings,
        total_income=total_income,
        total_expenses=total_expenses,
        recurring_expenses=recurring_expenses,
        total_savings=total_savings,
        balance=total_income - total_expenses - recurring_expenses - total_savings,
    )


def summarize_month(store: RecordStore, month: str) -> MonthlySummary:
    """Summarize the store's current contents for ``month``."""
    return summarize(
        store.transactions.records(),
        store.income_streams.records(),
        store.recurring_payments.records(),
        store.savings.records(),
        month,
    )
