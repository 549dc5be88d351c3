"""Record store package."""

from finance_tracker.store.record_store import (
    RecordCollection,
    RecordStore,
    SavingsCollection,
    TimestampIdGenerator,
)

__all__ = [
    "RecordCollection",
    "RecordStore",
    "SavingsCollection",
    "TimestampIdGenerator",
]
