"""
Store Event Models for Finance Tracker

Every change to the record store, and every failure the store degrades
around, is described by a StoreEvent and written to the structured log.

DESIGN DECISION: Events are logged, not stored. The tracker keeps no
history of past values; the log is for debugging only.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoreEventType(str, Enum):
    """Types of event the store and the form validator report."""
    # Mutations
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_REMOVED = "record_removed"
    RECORD_NOT_FOUND = "record_not_found"
    SAVINGS_REPLACED = "savings_replaced"

    # Loading and restoring
    CONTAINER_LOADED = "container_loaded"
    CONTAINER_LOAD_FAILED = "container_load_failed"
    SNAPSHOT_RESTORED = "snapshot_restored"
    SNAPSHOT_RESTORE_FAILED = "snapshot_restore_failed"

    # Write-through
    PERSISTENCE_FAILED = "persistence_failed"

    # Input
    VALIDATION_FAILED = "validation_failed"


class EventSeverity(str, Enum):
    """Severity level for store events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class StoreEvent(BaseModel):
    """A single store event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: StoreEventType
    severity: EventSeverity = EventSeverity.INFO

    # Which container and record the event is about
    container: Optional[str] = None
    record_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "container": self.container,
            "record_id": self.record_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class StoreEventBuilder:
    """
    Helper class to build store events with common patterns.

    Usage:
        event = StoreEventBuilder.record_added("transactions", record_id)
        event = StoreEventBuilder.persistence_failed("savings", str(error))
    """

    @staticmethod
    def record_added(container: str, record_id: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORD_ADDED,
            container=container,
            record_id=record_id,
            description=f"Record added to {container}",
        )

    @staticmethod
    def record_updated(container: str, record_id: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORD_UPDATED,
            container=container,
            record_id=record_id,
            description=f"Record replaced in {container}",
        )

    @staticmethod
    def record_removed(container: str, record_id: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORD_REMOVED,
            container=container,
            record_id=record_id,
            description=f"Record removed from {container}",
        )

    @staticmethod
    def record_not_found(
        container: str,
        record_id: str,
        operation: str,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORD_NOT_FOUND,
            severity=EventSeverity.WARNING,
            container=container,
            record_id=record_id,
            description=f"No record {record_id} in {container}; {operation} ignored",
            details={"operation": operation},
        )

    @staticmethod
    def savings_replaced(
        month: str,
        replaced_ids: list[str],
        record_id: Optional[str],
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SAVINGS_REPLACED,
            container="savings",
            record_id=record_id,
            description=f"Savings for {month} replaced",
            details={"month": month, "replaced_ids": replaced_ids},
        )

    @staticmethod
    def container_loaded(container: str, record_count: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CONTAINER_LOADED,
            severity=EventSeverity.DEBUG,
            container=container,
            description=f"Loaded {record_count} records into {container}",
            details={"record_count": record_count},
        )

    @staticmethod
    def container_load_failed(container: str, error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CONTAINER_LOAD_FAILED,
            severity=EventSeverity.WARNING,
            container=container,
            description=f"Could not read {container}; starting it empty",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_restored(record_counts: dict[str, int]) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SNAPSHOT_RESTORED,
            description="Store restored from snapshot",
            details={"record_counts": record_counts},
        )

    @staticmethod
    def snapshot_restore_failed(error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SNAPSHOT_RESTORE_FAILED,
            severity=EventSeverity.WARNING,
            description="Snapshot rejected; store left unchanged",
            error_message=error_message,
        )

    @staticmethod
    def persistence_failed(container: str, error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.PERSISTENCE_FAILED,
            severity=EventSeverity.ERROR,
            container=container,
            description=f"Could not write {container}; in-memory data kept",
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(form: str, issues: list[dict]) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.VALIDATION_FAILED,
            severity=EventSeverity.INFO,
            description=f"{form} rejected with {len(issues)} issues",
            details={"form": form, "issues": issues},
        )
