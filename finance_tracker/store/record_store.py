"""
Record Store

The single source of truth for the tracker's four containers:
transactions, income streams, recurring payments and savings.

DESIGN DECISION: The store is an explicit object handed to whoever needs
it (the aggregator reads it, the tracker session mutates it). There is no
module-level store.

Every mutation writes the affected container through to the storage
collaborator immediately. A failed write never rolls the mutation back:
the in-memory state stays authoritative for the session and the failure
is surfaced as a PersistenceWarning.

Unknown identifiers on update/remove are a silent no-op (logged only).
"""

import json
import time
import warnings
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from finance_tracker.events import StoreEventLogger
from finance_tracker.models.records import (
    IncomeStream,
    Record,
    RecurringPayment,
    Savings,
    Transaction,
)
from finance_tracker.services.storage import (
    ContainerKey,
    DocumentStorageInterface,
    NotFoundError,
    ParseError,
    PersistenceWarning,
    StorageError,
)


R = TypeVar("R", bound=Record)

WarningListener = Callable[[str], None]


class TimestampIdGenerator:
    """
    Issues identifiers from the nanosecond wall clock.

    Identifiers are strictly increasing within one generator even when the
    clock does not advance between calls.
    """

    def __init__(self, clock: Callable[[], int] = time.time_ns):
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        value = max(self._clock(), self._last + 1)
        self._last = value
        return str(value)


class RecordCollection(Generic[R]):
    """
    One container of records.

    Records are immutable; add and update store copies carrying the
    identifier the collection decided on.
    """

    def __init__(
        self,
        key: ContainerKey,
        record_type: type[R],
        on_change: Callable[[ContainerKey], None],
        id_generator: Callable[[], str],
        event_logger: StoreEventLogger,
        newest_first: bool = False,
    ):
        self.key = key
        self.record_type = record_type
        self._records: list[R] = []
        self._on_change = on_change
        self._next_id = id_generator
        self._events = event_logger
        self._newest_first = newest_first
        self._adapter = TypeAdapter(list[record_type])

    def __iter__(self) -> Iterator[R]:
        return iter(tuple(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def records(self) -> tuple[R, ...]:
        """Read-only view of the container in display order."""
        return tuple(self._records)

    def get(self, record_id: str) -> Optional[R]:
        index = self._index_of(record_id)
        return None if index is None else self._records[index]

    def require(self, record_id: str) -> R:
        """Get a record, raising NotFoundError when it does not exist."""
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"No record {record_id} in {self.key.value}")
        return record

    def add(self, record: R) -> R:
        """Store a record under a fresh identifier and return the stored copy."""
        self._check_type(record)
        stored = record.model_copy(update={"id": self._fresh_id()})
        if self._newest_first:
            self._records.insert(0, stored)
        else:
            self._records.append(stored)

        self._events.log_record_added(self.key.value, stored.id)
        self._on_change(self.key)
        return stored

    def update(self, record_id: str, record: R) -> Optional[R]:
        """
        Replace the record with ``record_id`` wholesale, keeping its identifier.

        Returns the stored copy, or None when no such record exists.
        """
        self._check_type(record)
        index = self._index_of(record_id)
        if index is None:
            self._events.log_record_not_found(self.key.value, record_id, "update")
            return None

        stored = record.model_copy(update={"id": record_id})
        self._records[index] = stored

        self._events.log_record_updated(self.key.value, record_id)
        self._on_change(self.key)
        return stored

    def remove(self, record_id: str) -> bool:
        """Delete a record. Returns False when no such record exists."""
        index = self._index_of(record_id)
        if index is None:
            self._events.log_record_not_found(self.key.value, record_id, "remove")
            return False

        del self._records[index]

        self._events.log_record_removed(self.key.value, record_id)
        self._on_change(self.key)
        return True

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def dump(self) -> list[dict[str, Any]]:
        """JSON-ready list of the container's records."""
        return self._adapter.dump_python(self._records, mode="json", by_alias=True)

    def dump_json(self) -> str:
        return self._adapter.dump_json(self._records, by_alias=True).decode("utf-8")

    def parse(self, data: Any) -> list[R]:
        """Validate a list of plain records; raises ParseError."""
        try:
            records = self._adapter.validate_python(data)
        except SchemaError as e:
            raise ParseError(
                f"Invalid {self.key.value}: {e.error_count()} errors",
                container=self.key.value,
            ) from e
        return self._checked(records)

    def parse_json(self, document: str) -> list[R]:
        """Validate a persisted document; raises ParseError."""
        try:
            records = self._adapter.validate_json(document)
        except SchemaError as e:
            raise ParseError(
                f"Invalid {self.key.value} document: {e.error_count()} errors",
                container=self.key.value,
            ) from e
        return self._checked(records)

    def replace_all(self, records: list[R]) -> None:
        """Swap in already-validated records without writing through."""
        self._records = list(records)

    # ------------------------------------------------------------------

    def _checked(self, records: list[R]) -> list[R]:
        seen = set()
        for record in records:
            if record.id is None:
                raise ParseError(
                    f"A record in {self.key.value} has no id",
                    container=self.key.value,
                )
            if record.id in seen:
                raise ParseError(
                    f"Duplicate id {record.id} in {self.key.value}",
                    container=self.key.value,
                )
            seen.add(record.id)
        return records

    def _check_type(self, record: Record) -> None:
        if not isinstance(record, self.record_type):
            raise TypeError(
                f"{self.key.value} holds {self.record_type.__name__}, "
                f"not {type(record).__name__}"
            )

    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _fresh_id(self) -> str:
        record_id = self._next_id()
        while self._index_of(record_id) is not None:
            record_id = self._next_id()
        return record_id


class SavingsCollection(RecordCollection[Savings]):
    """
    Savings container: at most one entry per month.

    Adding or updating an entry first removes every other entry for the
    same month, so the latest values win.
    """

    def add(self, record: Savings) -> Savings:
        self._check_type(record)
        self._drop_month(record.month, keep_id=None)
        return super().add(record)

    def update(self, record_id: str, record: Savings) -> Optional[Savings]:
        self._check_type(record)
        if self._index_of(record_id) is None:
            self._events.log_record_not_found(self.key.value, record_id, "update")
            return None
        self._drop_month(record.month, keep_id=record_id)
        return super().update(record_id, record)

    def for_month(self, month: str) -> Optional[Savings]:
        for record in self._records:
            if record.month == month:
                return record
        return None

    def replace_all(self, records: list[Savings]) -> None:
        # Later entries win, the same as a later add would.
        latest: dict[str, Savings] = {}
        for record in records:
            if record.month in latest:
                self._events.log_savings_replaced(
                    record.month, [latest[record.month].id], record.id
                )
                del latest[record.month]
            latest[record.month] = record
        super().replace_all(list(latest.values()))

    def _drop_month(self, month: str, keep_id: Optional[str]) -> None:
        replaced = [
            record.id for record in self._records
            if record.month == month and record.id != keep_id
        ]
        if not replaced:
            return
        self._records = [record for record in self._records if record.id not in replaced]
        self._events.log_savings_replaced(month, replaced, keep_id)


class RecordStore:
    """
    Holds the four containers and writes changes through to storage.

    Usage:
        store = RecordStore(JsonFileDocumentStorage())
        store.load()
        stored = store.add(transaction)
        store.update(stored.id, corrected)
        store.remove(Transaction, stored.id)
    """

    def __init__(
        self,
        storage: Optional[DocumentStorageInterface] = None,
        event_logger: Optional[StoreEventLogger] = None,
        id_generator: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Persistence collaborator. If None, nothing is persisted.
            event_logger: Where store events are logged.
            id_generator: Callable returning a new unique identifier.
        """
        self._storage = storage
        self._events = event_logger or StoreEventLogger()
        self._warning_listeners: list[WarningListener] = []
        next_id = id_generator or TimestampIdGenerator()

        def collection(key, record_type, cls=RecordCollection, **kwargs):
            return cls(key, record_type, self._persist, next_id, self._events, **kwargs)

        self.transactions: RecordCollection[Transaction] = collection(
            ContainerKey.TRANSACTIONS, Transaction, newest_first=True
        )
        self.income_streams: RecordCollection[IncomeStream] = collection(
            ContainerKey.INCOME_STREAMS, IncomeStream
        )
        self.recurring_payments: RecordCollection[RecurringPayment] = collection(
            ContainerKey.RECURRING_PAYMENTS, RecurringPayment
        )
        self.savings: SavingsCollection = collection(
            ContainerKey.SAVINGS, Savings, cls=SavingsCollection
        )

    @property
    def containers(self) -> dict[ContainerKey, RecordCollection]:
        return {
            ContainerKey.TRANSACTIONS: self.transactions,
            ContainerKey.INCOME_STREAMS: self.income_streams,
            ContainerKey.RECURRING_PAYMENTS: self.recurring_payments,
            ContainerKey.SAVINGS: self.savings,
        }

    def collection_for(self, record_type: type[Record]) -> RecordCollection:
        for container in self.containers.values():
            if issubclass(record_type, container.record_type):
                return container
        raise TypeError(f"No container holds {record_type.__name__}")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, record: R) -> R:
        """Store a new record of any kind; returns it with its identifier."""
        return self.collection_for(type(record)).add(record)

    def update(self, record_id: str, record: R) -> Optional[R]:
        """Replace a record wholesale; None when the identifier is unknown."""
        return self.collection_for(type(record)).update(record_id, record)

    def remove(self, record_type: type[Record], record_id: str) -> bool:
        """Delete a record; False when the identifier is unknown."""
        return self.collection_for(record_type).remove(record_id)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def add_warning_listener(self, listener: WarningListener) -> None:
        """Register a callable told about every failed write-through."""
        self._warning_listeners.append(listener)

    def load(self) -> list[ParseError]:
        """
        Populate every container from storage.

        Each container is loaded on its own: a missing document leaves it
        empty, and an unreadable one leaves it empty and is reported in
        the returned list without stopping the others.
        """
        errors: list[ParseError] = []
        if self._storage is None:
            return errors

        for key, container in self.containers.items():
            try:
                document = self._storage.load(key.value)
                records = [] if document is None else container.parse_json(document)
            except ParseError as e:
                errors.append(e)
                records = []
                self._events.log_container_load_failed(key.value, str(e))
            except StorageError as e:
                errors.append(ParseError(str(e), container=key.value))
                records = []
                self._events.log_container_load_failed(key.value, str(e))
            else:
                self._events.log_container_loaded(key.value, len(records))

            container.replace_all(records)

        return errors

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        """All four containers as a JSON-ready document."""
        return {key.value: container.dump() for key, container in self.containers.items()}

    def restore(self, data: Union[str, dict[str, Any]]) -> None:
        """
        Replace every container with the contents of a snapshot.

        All four containers are validated before any is replaced; on a
        ParseError the store is left exactly as it was. A container
        missing from the snapshot is restored empty.
        """
        try:
            parsed = self._parse_snapshot(data)
        except ParseError as e:
            self._events.log_snapshot_restore_failed(str(e))
            raise

        for key, container in self.containers.items():
            container.replace_all(parsed[key])

        self._events.log_snapshot_restored(
            {key.value: len(container) for key, container in self.containers.items()}
        )
        for key in self.containers:
            self._persist(key)

    def _parse_snapshot(self, data: Union[str, dict[str, Any]]) -> dict[ContainerKey, list]:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except (ValueError, RecursionError) as e:
                raise ParseError(f"Snapshot is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ParseError(f"Snapshot must be an object, got {type(data).__name__}")

        return {
            key: container.parse(data.get(key.value, []))
            for key, container in self.containers.items()
        }

    def _persist(self, key: ContainerKey) -> None:
        if self._storage is None:
            return

        try:
            self._storage.save(key.value, self.containers[key].dump_json())
        except StorageError as e:
            message = f"Could not save {key.value}: {e}. Changes are kept for this session."
            self._events.log_persistence_failed(key.value, str(e))
            warnings.warn(message, PersistenceWarning, stacklevel=4)
            for listener in self._warning_listeners:
                listener(message)
