"""Form validation package."""

from finance_tracker.validation.forms import (
    IncomeForm,
    RecurringPaymentForm,
    SavingsForm,
    TransactionForm,
)
from finance_tracker.validation.validator import (
    FormValidator,
    ValidationError,
    ValidationIssue,
    ValidationResult,
    get_user_friendly_summary,
)

__all__ = [
    # Forms
    "IncomeForm",
    "RecurringPaymentForm",
    "SavingsForm",
    "TransactionForm",
    # Validation
    "FormValidator",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
    "get_user_friendly_summary",
]
