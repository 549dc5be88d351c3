"""
Form Validation

Every record reaches the store through here. Raw form strings are parsed
and checked before a typed record is constructed, so the store never sees
a non-numeric or negative amount.

Checks fall into two severities:

ERROR - blocks construction:
- Missing, non-numeric, non-finite or negative amounts
- More than two decimal places (amounts are kept in minor units)
- Missing required text, unparseable dates, unknown choices
- End date before start date

WARNING - reported, does not block:
- Unusually large amounts
- Amount owed larger than the amount paid

IMPORTANT: Validation never silently fixes a value. The only defaulting
is the documented one: an empty amount owed means zero, an empty end date
means open-ended.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, NoReturn, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from finance_tracker.config import AppSettings, get_settings
from finance_tracker.events import StoreEventLogger
from finance_tracker.models.records import (
    Frequency,
    IncomeStream,
    RecurringPayment,
    Savings,
    Transaction,
    TransactionType,
)
from finance_tracker.validation.forms import (
    IncomeForm,
    RecurringPaymentForm,
    SavingsForm,
    TransactionForm,
)


_CENT = Decimal("0.01")


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """Outcome of validating one form."""

    form: str
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]


class ValidationError(ValueError):
    """Form input rejected before reaching the store."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"{result.form} is invalid: {messages}")

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.result.issues


def _error(field: str, issue_type: str, message: str, fix: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
        suggested_fix=fix,
    )


def _warning(field: str, issue_type: str, message: str, fix: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="warning",
        suggested_fix=fix,
    )


class FormValidator:
    """
    Validates raw forms and builds typed records from them.

    ``check_*`` methods only report. ``build_*`` methods report and, when
    there is no error, return the record; otherwise they raise
    ValidationError.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        event_logger: Optional[StoreEventLogger] = None,
    ):
        self._settings = settings or get_settings().app
        self._events = event_logger or StoreEventLogger()

    # ------------------------------------------------------------------
    # Field parsers
    # ------------------------------------------------------------------

    def _parse_amount(
        self,
        raw: str,
        field: str,
        issues: list[ValidationIssue],
        blank_value: Optional[Decimal] = None,
    ) -> Optional[Decimal]:
        """Parse a money amount; returns None when an error was recorded."""
        if not raw:
            if blank_value is not None:
                return blank_value
            issues.append(_error(field, "missing", f"{field} is required"))
            return None

        try:
            amount = Decimal(raw.replace(",", ""))
        except InvalidOperation:
            issues.append(_error(
                field, "not_a_number", f"{field} must be a number, got '{raw}'",
                "Enter digits only, e.g. 12.50",
            ))
            return None

        if not amount.is_finite():
            issues.append(_error(field, "not_a_number", f"{field} must be a finite number"))
            return None
        if amount < 0:
            issues.append(_error(
                field, "negative", f"{field} cannot be negative",
                "Enter the amount without a minus sign",
            ))
            return None
        if amount.as_tuple().exponent < -2:
            if amount.normalize().as_tuple().exponent < -2:
                issues.append(_error(
                    field, "too_precise", f"{field} has more than two decimal places",
                ))
                return None
            amount = amount.quantize(_CENT)

        max_amount = Decimal(str(self._settings.max_reasonable_amount))
        if amount > max_amount:
            issues.append(_warning(
                field, "suspicious_value",
                f"{field} ({amount:,.2f}) seems unusually high",
                "Please verify this amount is correct",
            ))
        return amount

    def _parse_date(
        self,
        raw: str,
        field: str,
        issues: list[ValidationIssue],
    ) -> Optional[date]:
        if not raw:
            issues.append(_error(field, "missing", f"{field} is required"))
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            issues.append(_error(
                field, "invalid_format", f"{field} must be a date like 2024-05-10, got '{raw}'",
            ))
            return None

    def _require_text(
        self,
        raw: str,
        field: str,
        issues: list[ValidationIssue],
    ) -> str:
        if not raw:
            issues.append(_error(field, "missing", f"{field} is required"))
        return raw

    # ------------------------------------------------------------------
    # Per-form field extraction
    # ------------------------------------------------------------------

    def _transaction_fields(
        self,
        form: TransactionForm,
    ) -> tuple[dict[str, Any], list[ValidationIssue]]:
        issues: list[ValidationIssue] = []

        values = {
            "date": self._parse_date(form.date, "date", issues),
            "description": self._require_text(form.description, "description", issues),
            "original_amount": self._parse_amount(form.original_amount, "original_amount", issues),
            "amount_owed": self._parse_amount(
                form.amount_owed, "amount_owed", issues, blank_value=Decimal("0"),
            ),
            "category": form.category or self._settings.default_category,
            "owed_by": form.owed_by or None,
        }

        try:
            values["type"] = TransactionType(form.type.lower())
        except ValueError:
            issues.append(_error(
                "type", "invalid_choice",
                f"type must be one of {[t.value for t in TransactionType]}, got '{form.type}'",
            ))

        original = values["original_amount"]
        owed = values["amount_owed"]
        if original is not None and owed is not None and owed > original:
            issues.append(_warning(
                "amount_owed", "inconsistent",
                "Amount owed is larger than the amount paid; the final amount will be negative",
                "Please verify both amounts",
            ))

        return values, issues

    def _income_fields(
        self,
        form: IncomeForm,
    ) -> tuple[dict[str, Any], list[ValidationIssue]]:
        issues: list[ValidationIssue] = []
        values = {
            "source": self._require_text(form.source, "source", issues),
            "amount": self._parse_amount(form.amount, "amount", issues),
            "description": form.description,
        }
        return values, issues

    def _recurring_fields(
        self,
        form: RecurringPaymentForm,
    ) -> tuple[dict[str, Any], list[ValidationIssue]]:
        issues: list[ValidationIssue] = []
        values: dict[str, Any] = {
            "description": self._require_text(form.description, "description", issues),
            "amount": self._parse_amount(form.amount, "amount", issues),
            "start_date": self._parse_date(form.start_date, "start_date", issues),
        }

        if form.end_date:
            values["end_date"] = self._parse_date(form.end_date, "end_date", issues)
            start, end = values["start_date"], values["end_date"]
            if start is not None and end is not None and end < start:
                issues.append(_error(
                    "end_date", "inconsistent", "End date cannot be before start date",
                ))

        try:
            frequency = Frequency(form.frequency.lower())
        except ValueError:
            issues.append(_error(
                "frequency", "invalid_choice",
                f"frequency must be one of {[f.value for f in Frequency]}, got '{form.frequency}'",
            ))
            return values, issues

        values["frequency"] = frequency
        if frequency == Frequency.MONTHLY:
            values["day_of_month"] = self._parse_day_of_month(form.day_of_month, issues)

        return values, issues

    def _parse_day_of_month(
        self,
        raw: str,
        issues: list[ValidationIssue],
    ) -> Optional[int]:
        try:
            day = int(raw)
        except ValueError:
            issues.append(_error(
                "day_of_month", "not_a_number", "day_of_month must be a whole number from 1 to 31",
            ))
            return None
        if not 1 <= day <= 31:
            issues.append(_error(
                "day_of_month", "out_of_range", "day_of_month must be between 1 and 31",
            ))
            return None
        return day

    def _savings_fields(
        self,
        form: SavingsForm,
    ) -> tuple[dict[str, Any], list[ValidationIssue]]:
        issues: list[ValidationIssue] = []
        values = {
            "amount": self._parse_amount(form.amount, "amount", issues),
            "description": form.description,
        }
        return values, issues

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check_transaction(self, form: TransactionForm) -> ValidationResult:
        _, issues = self._transaction_fields(form)
        return ValidationResult(form="transaction", issues=issues)

    def check_income(self, form: IncomeForm) -> ValidationResult:
        _, issues = self._income_fields(form)
        return ValidationResult(form="income", issues=issues)

    def check_recurring_payment(self, form: RecurringPaymentForm) -> ValidationResult:
        _, issues = self._recurring_fields(form)
        return ValidationResult(form="recurring_payment", issues=issues)

    def check_savings(self, form: SavingsForm) -> ValidationResult:
        _, issues = self._savings_fields(form)
        return ValidationResult(form="savings", issues=issues)

    def build_transaction(self, form: TransactionForm) -> Transaction:
        values, issues = self._transaction_fields(form)
        return self._build(Transaction, "transaction", values, issues)

    def build_income(self, form: IncomeForm, month: str) -> IncomeStream:
        values, issues = self._income_fields(form)
        values["month"] = month
        return self._build(IncomeStream, "income", values, issues)

    def build_recurring_payment(self, form: RecurringPaymentForm) -> RecurringPayment:
        values, issues = self._recurring_fields(form)
        return self._build(RecurringPayment, "recurring_payment", values, issues)

    def build_savings(self, form: SavingsForm, month: str) -> Savings:
        values, issues = self._savings_fields(form)
        values["month"] = month
        return self._build(Savings, "savings", values, issues)

    def _build(self, model, form_name: str, values: dict[str, Any], issues: list[ValidationIssue]):
        result = ValidationResult(form=form_name, issues=issues)
        if result.has_errors:
            self._reject(result)

        try:
            return model(**values)
        except SchemaError as e:
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or form_name
                issues.append(_error(field, error["type"], f"{field}: {error['msg']}"))
            self._reject(ValidationResult(form=form_name, issues=issues))

    def _reject(self, result: ValidationResult) -> NoReturn:
        self._events.log_validation_failed(
            result.form,
            [issue.model_dump() for issue in result.issues],
        )
        raise ValidationError(result)


def get_user_friendly_summary(result: ValidationResult) -> str:
    """Summarize a validation result for display next to the form."""
    if result.is_valid and not result.warnings:
        return "All checks passed."

    lines = []

    if result.has_errors:
        lines.append("Please fix the following:")
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"  - {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"    ({issue.suggested_fix})")

    if result.warnings:
        if lines:
            lines.append("")
        lines.append("Please verify the following:")
        for warning in result.warnings:
            lines.append(f"  - {warning}")

    return "\n".join(lines)
