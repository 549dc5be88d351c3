"""Tests for the tracker session used by the UI layer."""

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.config import Settings
from finance_tracker.services.storage import (
    InMemoryDocumentStorage,
    JsonFileDocumentStorage,
    PersistenceWarning,
    StorageError,
)
from finance_tracker.store import RecordStore
from finance_tracker.tracker import FinanceTracker, create_tracker
from finance_tracker.validation import (
    IncomeForm,
    RecurringPaymentForm,
    SavingsForm,
    TransactionForm,
    ValidationError,
)


TODAY = date(2024, 5, 15)


class FailingStorage(InMemoryDocumentStorage):
    """Storage whose writes always fail."""

    def save(self, key: str, document: str) -> None:
        raise StorageError("disk full")


@pytest.fixture
def tracker():
    return FinanceTracker(RecordStore(InMemoryDocumentStorage()), settings=Settings(), today=TODAY)


def dinner(**overrides) -> TransactionForm:
    values = {
        "date": "2024-05-10",
        "description": "Dinner",
        "original_amount": "100",
        "amount_owed": "20",
        "category": "Food",
    }
    values.update(overrides)
    return TransactionForm(**values)


class TestNavigation:
    """Tests for selecting the month."""

    def test_starts_on_current_month(self, tracker):
        """Test the session opens on the month of the given day."""
        assert tracker.current_month == "2024-05"
        assert tracker.current_month_label == "May 2024"

    def test_next_and_previous(self, tracker):
        """Test stepping forwards and back."""
        tracker.go_to_month("2024-12")
        assert tracker.next_month() == "2025-01"
        assert tracker.previous_month() == "2024-12"
        assert tracker.previous_month() == "2024-11"

    def test_go_to_malformed_month(self, tracker):
        """Test an invalid month is refused and the selection kept."""
        with pytest.raises(ValueError):
            tracker.go_to_month("December")
        assert tracker.current_month == "2024-05"


class TestSubmissions:
    """Tests for turning forms into records."""

    def test_transaction_round_trip(self, tracker):
        """Test a submitted transaction shows in the summary."""
        stored = tracker.submit_transaction(dinner())
        tracker.submit_income(IncomeForm(source="Salary", amount="2000"))

        summary = tracker.summary()
        assert summary.transactions == (stored,)
        assert summary.balance == Decimal("1920")

    def test_invalid_form_leaves_store_unchanged(self, tracker):
        """Test a rejected form does not reach the store."""
        with pytest.raises(ValidationError):
            tracker.submit_transaction(dinner(original_amount="lots"))
        assert len(tracker.store.transactions) == 0

    def test_edit_transaction(self, tracker):
        """Test editing prefills the form and replaces the record in place."""
        stored = tracker.submit_transaction(dinner())

        form = tracker.edit_transaction(stored.id)
        assert form.original_amount == "100"
        assert form.category == "Food"

        updated = tracker.submit_transaction(
            form.model_copy(update={"amount_owed": "50"}), editing_id=stored.id
        )
        assert updated.id == stored.id
        assert tracker.store.transactions.records() == (updated,)
        assert updated.final_amount == Decimal("50")

    def test_edit_missing_transaction(self, tracker):
        """Test editing a deleted transaction gives no form."""
        assert tracker.edit_transaction("gone") is None

    def test_category_choices(self, tracker):
        """Test the form offers the standard categories, default included."""
        assert tracker.categories == (
            "Food", "Transport", "Housing", "Entertainment", "Utilities", "Other",
        )
        assert TransactionForm().category in tracker.categories

    def test_custom_default_category_is_offered(self, monkeypatch):
        """Test a configured default category joins the choices."""
        monkeypatch.setenv("FINANCE_TRACKER_DEFAULT_CATEGORY", "Pets")
        tracker = FinanceTracker(RecordStore(), settings=Settings(), today=TODAY)
        assert tracker.categories[-1] == "Pets"

    def test_delete_transaction(self, tracker):
        """Test deleting by identifier."""
        stored = tracker.submit_transaction(dinner())
        assert tracker.delete_transaction(stored.id) is True
        assert tracker.delete_transaction(stored.id) is False

    def test_income_and_savings_use_selected_month(self, tracker):
        """Test month-scoped records follow the selected month."""
        tracker.go_to_month("2024-07")
        income = tracker.submit_income(IncomeForm(source="Bonus", amount="500"))
        savings = tracker.submit_savings(SavingsForm(amount="100"))
        assert income.month == "2024-07"
        assert savings.month == "2024-07"

    def test_resubmitting_savings_replaces(self, tracker):
        """Test the selected month keeps only the latest savings."""
        tracker.submit_savings(SavingsForm(amount="300"))
        latest = tracker.submit_savings(SavingsForm(amount="500"))
        assert tracker.store.savings.records() == (latest,)
        assert tracker.summary().total_savings == Decimal("500")

    def test_recurring_payment_counts_from_start(self, tracker):
        """Test a recurring payment affects months from its start onwards."""
        payment = tracker.submit_recurring_payment(RecurringPaymentForm(
            description="Rent", amount="900", start_date="2024-05-01", day_of_month="1",
        ))
        assert tracker.summary().recurring_expenses == Decimal("900")
        tracker.previous_month()
        assert tracker.summary().recurring_expenses == Decimal("0")
        assert tracker.delete_recurring_payment(payment.id) is True

    def test_delete_income_and_savings(self, tracker):
        """Test month-scoped records can be deleted."""
        income = tracker.submit_income(IncomeForm(source="Salary", amount="2000"))
        savings = tracker.submit_savings(SavingsForm(amount="100"))
        assert tracker.delete_income(income.id) is True
        assert tracker.delete_savings(savings.id) is True
        assert tracker.summary().balance == Decimal("0")


class TestDashboard:
    """Tests for the formatted dashboard view."""

    def test_formatted_totals(self, tracker):
        """Test totals are formatted for display."""
        tracker.submit_transaction(dinner())
        tracker.submit_income(IncomeForm(source="Salary", amount="2000"))

        view = tracker.dashboard()

        assert view["month_label"] == "May 2024"
        assert view["income"] == "£2,000.00"
        assert view["expenses"] == "£80.00"
        assert view["balance"] == "£1,920.00"
        assert view["balance_is_negative"] is False
        assert view["recent_transactions"][0]["final_amount"] == "£80.00"

    def test_negative_balance(self, tracker):
        """Test an overspent month is flagged."""
        tracker.submit_transaction(dinner(amount_owed="0"))
        view = tracker.dashboard()
        assert view["balance"] == "-£100.00"
        assert view["balance_is_negative"] is True

    def test_recent_list_is_limited(self, tracker):
        """Test the recent list is capped and newest first."""
        for day in range(1, 9):
            tracker.submit_transaction(dinner(date=f"2024-05-{day:02d}", description=f"Day {day}"))
        recent = tracker.dashboard()["recent_transactions"]
        assert len(recent) == 5
        assert recent[0]["description"] == "Day 8"


class TestWarnings:
    """Tests for surfacing persistence failures."""

    def test_failed_write_is_reported(self):
        """Test a failed save keeps the record and queues a warning."""
        tracker = FinanceTracker(RecordStore(FailingStorage()), settings=Settings(), today=TODAY)

        with pytest.warns(PersistenceWarning):
            stored = tracker.submit_transaction(dinner())

        assert tracker.store.transactions.get(stored.id) == stored
        messages = tracker.pop_warnings()
        assert len(messages) == 1
        assert "transactions" in messages[0]
        assert tracker.pop_warnings() == []


class TestCreateTracker:
    """Tests for the tracker factory."""

    def test_reloads_saved_data(self, tmp_path):
        """Test a new session sees data saved by an earlier one."""
        storage = JsonFileDocumentStorage(data_dir=tmp_path, write_attempts=1)
        first = create_tracker(settings=Settings(), storage=storage, today=TODAY)
        first.submit_transaction(dinner())
        first.submit_income(IncomeForm(source="Salary", amount="2000"))

        second = create_tracker(settings=Settings(), storage=storage, today=TODAY)

        assert second.summary().balance == Decimal("1920")
        assert second.pop_warnings() == []

    def test_corrupt_container_is_reported(self, tmp_path):
        """Test a container that fails to load is offered as a warning."""
        (tmp_path / "savings.json").write_text("[{broken")
        storage = JsonFileDocumentStorage(data_dir=tmp_path, write_attempts=1)

        tracker = create_tracker(settings=Settings(), storage=storage, today=TODAY)

        assert tracker.pop_warnings() == [
            "Could not read saved savings; it was started empty."
        ]
        assert len(tracker.store.savings) == 0

    def test_default_storage_uses_settings(self, tmp_path, monkeypatch):
        """Test the data directory comes from the environment."""
        monkeypatch.setenv("FINANCE_TRACKER_STORAGE_DATA_DIR", str(tmp_path / "env-data"))
        tracker = create_tracker(settings=Settings(), today=TODAY)
        tracker.submit_savings(SavingsForm(amount="10"))
        assert (tmp_path / "env-data" / "savings.json").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
