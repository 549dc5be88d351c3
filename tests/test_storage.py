"""Tests for document storage implementations."""

import json
import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.models.records import Savings, Transaction
from finance_tracker.services.storage import (
    ContainerKey,
    InMemoryDocumentStorage,
    JsonFileDocumentStorage,
    StorageError,
)
from finance_tracker.store import RecordStore


@pytest.fixture
def file_storage(tmp_path):
    return JsonFileDocumentStorage(data_dir=tmp_path / "data", write_attempts=1)


class TestInMemoryStorage:
    """Tests for InMemoryDocumentStorage."""

    def test_missing_key(self):
        """Test an unknown key loads as None."""
        assert InMemoryDocumentStorage().load("transactions") is None

    def test_save_replaces(self):
        """Test a later save replaces the earlier document."""
        storage = InMemoryDocumentStorage()
        storage.save("savings", "[]")
        storage.save("savings", "[{}]")
        assert storage.load("savings") == "[{}]"
        assert storage.keys() == ["savings"]


class TestJsonFileStorage:
    """Tests for JsonFileDocumentStorage."""

    def test_path_per_container(self, file_storage, tmp_path):
        """Test each key maps to its own JSON file."""
        assert file_storage.path_for("incomeStreams") == tmp_path / "data" / "incomeStreams.json"

    def test_missing_file_is_none(self, file_storage):
        """Test a container never saved loads as None."""
        assert file_storage.load("transactions") is None

    def test_save_and_load(self, file_storage):
        """Test a saved document is read back unchanged and the directory is created."""
        file_storage.save("savings", '[{"id": "1"}]')
        assert file_storage.load("savings") == '[{"id": "1"}]'
        assert file_storage.data_dir.is_dir()

    def test_no_temporary_files_left(self, file_storage):
        """Test writes leave only the container file behind."""
        file_storage.save("transactions", "[]")
        file_storage.save("transactions", "[1]")
        assert [p.name for p in file_storage.data_dir.iterdir()] == ["transactions.json"]

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test an unwritable location surfaces as StorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = JsonFileDocumentStorage(data_dir=blocker, write_attempts=1)
        with pytest.raises(StorageError):
            storage.save("transactions", "[]")

    def test_unreadable_document_raises_storage_error(self, file_storage):
        """Test a document that is not UTF-8 surfaces as StorageError."""
        file_storage.data_dir.mkdir(parents=True)
        file_storage.path_for("savings").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(StorageError):
            file_storage.load("savings")


class TestStoreOnFiles:
    """Tests for the record store persisting to files."""

    def test_reload_from_disk(self, file_storage):
        """Test a fresh store sees what an earlier one wrote."""
        store = RecordStore(file_storage)
        stored = store.add(Transaction(
            date=date(2024, 5, 10),
            description="Dinner",
            original_amount=Decimal("100"),
            amount_owed=Decimal("20"),
        ))
        store.add(Savings(month="2024-05", amount=Decimal("300")))

        reloaded = RecordStore(file_storage)
        assert reloaded.load() == []
        assert reloaded.transactions.records() == (stored,)
        assert reloaded.savings.for_month("2024-05").amount == Decimal("300")

    def test_documents_are_readable_json(self, file_storage):
        """Test each container file holds a camelCase JSON array."""
        store = RecordStore(file_storage)
        store.add(Transaction(
            date=date(2024, 5, 10),
            description="Dinner",
            original_amount=Decimal("100"),
            amount_owed=Decimal("20"),
        ))
        document = json.loads(file_storage.path_for(ContainerKey.TRANSACTIONS.value).read_text())
        assert document[0]["originalAmount"] == "100"
        assert document[0]["finalAmount"] == "80"

    def test_corrupt_file_only_empties_its_container(self, file_storage):
        """Test one corrupt file does not stop the other containers loading."""
        store = RecordStore(file_storage)
        store.add(Savings(month="2024-05", amount=Decimal("300")))
        file_storage.path_for("transactions").write_text("{not json")

        reloaded = RecordStore(file_storage)
        errors = reloaded.load()

        assert [error.container for error in errors] == ["transactions"]
        assert len(reloaded.transactions) == 0
        assert len(reloaded.savings) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
