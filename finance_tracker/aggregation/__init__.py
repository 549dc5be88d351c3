"""Monthly aggregation package."""

from finance_tracker.aggregation.formatting import (
    format_currency,
    recurring_period_label,
)
from finance_tracker.aggregation.monthly import (
    MonthlySummary,
    active_recurring_payments,
    income_for_month,
    is_active_in_month,
    savings_for_month,
    summarize,
    summarize_month,
    transactions_for_month,
)
from finance_tracker.aggregation.months import (
    current_month_key,
    first_day_of_month,
    month_key_of,
    month_label,
    next_month_key,
    parse_month_key,
    previous_month_key,
    shift_month,
)

__all__ = [
    # Formatting
    "format_currency",
    "recurring_period_label",
    # Aggregation
    "MonthlySummary",
    "active_recurring_payments",
    "income_for_month",
    "is_active_in_month",
    "savings_for_month",
    "summarize",
    "summarize_month",
    "transactions_for_month",
    # Month keys
    "current_month_key",
    "first_day_of_month",
    "month_key_of",
    "month_label",
    "next_month_key",
    "parse_month_key",
    "previous_month_key",
    "shift_month",
]
