"""
Finance Tracker Session

This module ties the components together for the UI layer:
- the record store (source of truth)
- the form validator (the only way user input becomes a record)
- the monthly aggregator (derived totals for the selected month)

The UI renders what FinanceTracker returns and calls its methods in
response to user actions. Everything runs synchronously on the caller's
thread; after each action the UI asks for a fresh summary.
"""

from datetime import date
from typing import Optional

from finance_tracker.aggregation import (
    MonthlySummary,
    current_month_key,
    format_currency,
    month_label,
    next_month_key,
    parse_month_key,
    previous_month_key,
    summarize_month,
)
from finance_tracker.config import Settings, get_settings
from finance_tracker.events import StoreEventLogger, configure_logging
from finance_tracker.models.records import (
    DEFAULT_CATEGORIES,
    IncomeStream,
    RecurringPayment,
    Savings,
    Transaction,
)
from finance_tracker.services.storage import (
    DocumentStorageInterface,
    JsonFileDocumentStorage,
    NotFoundError,
)
from finance_tracker.store import RecordStore
from finance_tracker.validation import (
    FormValidator,
    IncomeForm,
    RecurringPaymentForm,
    SavingsForm,
    TransactionForm,
)


class FinanceTracker:
    """
    One user's session over a record store.

    Holds the selected month and turns form submissions into store
    operations. Persistence warnings raised by the store are collected
    here until the UI pops them for display.
    """

    def __init__(
        self,
        store: RecordStore,
        validator: Optional[FormValidator] = None,
        settings: Optional[Settings] = None,
        event_logger: Optional[StoreEventLogger] = None,
        today: Optional[date] = None,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._display = self._settings.display
        self._events = event_logger or StoreEventLogger()
        self._validator = validator or FormValidator(
            settings=self._settings.app,
            event_logger=self._events,
        )
        self._current_month = current_month_key(today)
        self._warnings: list[str] = []
        store.add_warning_listener(self.notify)

    @property
    def store(self) -> RecordStore:
        return self._store

    # ------------------------------------------------------------------
    # Month navigation
    # ------------------------------------------------------------------

    @property
    def current_month(self) -> str:
        return self._current_month

    @property
    def current_month_label(self) -> str:
        return month_label(self._current_month)

    def next_month(self) -> str:
        self._current_month = next_month_key(self._current_month)
        return self._current_month

    def previous_month(self) -> str:
        self._current_month = previous_month_key(self._current_month)
        return self._current_month

    def go_to_month(self, month: str) -> str:
        parse_month_key(month)
        self._current_month = month
        return self._current_month

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def submit_transaction(
        self,
        form: TransactionForm,
        editing_id: Optional[str] = None,
    ) -> Optional[Transaction]:
        """
        Add a transaction, or replace ``editing_id`` when editing.

        Raises ValidationError before touching the store if the form is
        invalid. Returns None when ``editing_id`` no longer exists.
        """
        transaction = self._validator.build_transaction(form)
        if editing_id:
            return self._store.transactions.update(editing_id, transaction)
        return self._store.transactions.add(transaction)

    def edit_transaction(self, transaction_id: str) -> Optional[TransactionForm]:
        """Prefilled form for an existing transaction; None if it is gone."""
        try:
            transaction = self._store.transactions.require(transaction_id)
        except NotFoundError:
            self._events.log_record_not_found(
                self._store.transactions.key.value, transaction_id, "edit"
            )
            return None

        return TransactionForm(
            date=transaction.date.isoformat(),
            description=transaction.description,
            original_amount=str(transaction.original_amount),
            amount_owed=str(transaction.amount_owed),
            type=transaction.type.value,
            category=transaction.category,
            owed_by=transaction.owed_by or "",
        )

    def delete_transaction(self, transaction_id: str) -> bool:
        return self._store.remove(Transaction, transaction_id)

    @property
    def categories(self) -> tuple[str, ...]:
        """Choices for the transaction form's category picker."""
        default = self._settings.app.default_category
        if default in DEFAULT_CATEGORIES:
            return DEFAULT_CATEGORIES
        return DEFAULT_CATEGORIES + (default,)

    # ------------------------------------------------------------------
    # Income, recurring payments, savings
    # ------------------------------------------------------------------

    def submit_income(self, form: IncomeForm) -> IncomeStream:
        """Record income for the selected month."""
        income = self._validator.build_income(form, self._current_month)
        return self._store.income_streams.add(income)

    def delete_income(self, income_id: str) -> bool:
        return self._store.remove(IncomeStream, income_id)

    def submit_recurring_payment(self, form: RecurringPaymentForm) -> RecurringPayment:
        payment = self._validator.build_recurring_payment(form)
        return self._store.recurring_payments.add(payment)

    def delete_recurring_payment(self, payment_id: str) -> bool:
        return self._store.remove(RecurringPayment, payment_id)

    def submit_savings(self, form: SavingsForm) -> Savings:
        """Record savings for the selected month, replacing any earlier entry."""
        savings = self._validator.build_savings(form, self._current_month)
        return self._store.savings.add(savings)

    def delete_savings(self, savings_id: str) -> bool:
        return self._store.remove(Savings, savings_id)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def summary(self) -> MonthlySummary:
        return summarize_month(self._store, self._current_month)

    def dashboard(self) -> dict:
        """Formatted totals and the recent transactions of the selected month."""
        summary = self.summary()
        symbol = self._display.currency_symbol
        recent = summary.recent_transactions(self._display.recent_transactions_limit)

        return {
            "month": summary.month,
            "month_label": month_label(summary.month),
            "income": format_currency(summary.total_income, symbol),
            "expenses": format_currency(summary.total_expenses, symbol),
            "recurring": format_currency(summary.recurring_expenses, symbol),
            "savings": format_currency(summary.total_savings, symbol),
            "balance": format_currency(summary.balance, symbol),
            "balance_is_negative": summary.balance < 0,
            "recent_transactions": [
                {
                    "id": t.id,
                    "date": t.date.isoformat(),
                    "description": t.description,
                    "category": t.category,
                    "type": t.type.value,
                    "final_amount": format_currency(t.final_amount, symbol),
                }
                for t in recent
            ],
        }

    def notify(self, message: str) -> None:
        """Queue a message for the UI to show."""
        self._warnings.append(message)

    def pop_warnings(self) -> list[str]:
        """Warnings since the last call, oldest first."""
        pending = self._warnings
        self._warnings = []
        return pending


def create_tracker(
    settings: Optional[Settings] = None,
    storage: Optional[DocumentStorageInterface] = None,
    today: Optional[date] = None,
) -> FinanceTracker:
    """
    Factory function to create a ready-to-use tracker.

    Args:
        settings: Settings to use; loaded from the environment if None.
        storage: Document storage; JSON files under the configured data
                 directory if None.
        today: Date whose month is selected first; today if None.

    Containers that fail to load start empty; the failures are logged and
    offered to the UI through pop_warnings().
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.json_logs)

    if storage is None:
        storage_settings = settings.storage
        storage = JsonFileDocumentStorage(
            data_dir=storage_settings.data_dir,
            write_attempts=storage_settings.write_attempts,
        )

    event_logger = StoreEventLogger()
    store = RecordStore(storage, event_logger=event_logger)
    load_errors = store.load()

    tracker = FinanceTracker(
        store,
        settings=settings,
        event_logger=event_logger,
        today=today,
    )
    for error in load_errors:
        tracker.notify(f"Could not read saved {error.container}; it was started empty.")
    return tracker
