"""
Store Event Logger

Every store mutation and every degraded failure path is logged as a
structured event. Events are not persisted anywhere else.
"""

import logging
from typing import Optional

import structlog

from finance_tracker.models.events import (
    EventSeverity,
    StoreEvent,
    StoreEventBuilder,
)


LOGGER_NAME = "finance_tracker"


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Only the "finance_tracker" logger level is set. Handlers belong to
    the host application; without any, stdlib logging falls back to
    stderr for warnings and errors.
    """
    logging.getLogger(LOGGER_NAME).setLevel(
        getattr(logging, level.upper(), logging.INFO)
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class StoreEventLogger:
    """Writes StoreEvents to the structured log."""

    def __init__(self, logger_name: str = LOGGER_NAME):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: StoreEvent) -> None:
        """Log an event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("store_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("store_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("store_event", **log_dict)
        else:
            self._logger.info("store_event", **log_dict)

    def log_record_added(self, container: str, record_id: str) -> None:
        self.log(StoreEventBuilder.record_added(container, record_id))

    def log_record_updated(self, container: str, record_id: str) -> None:
        self.log(StoreEventBuilder.record_updated(container, record_id))

    def log_record_removed(self, container: str, record_id: str) -> None:
        self.log(StoreEventBuilder.record_removed(container, record_id))

    def log_record_not_found(
        self,
        container: str,
        record_id: str,
        operation: str,
    ) -> None:
        self.log(StoreEventBuilder.record_not_found(container, record_id, operation))

    def log_savings_replaced(
        self,
        month: str,
        replaced_ids: list[str],
        record_id: Optional[str] = None,
    ) -> None:
        self.log(StoreEventBuilder.savings_replaced(month, replaced_ids, record_id))

    def log_container_loaded(self, container: str, record_count: int) -> None:
        self.log(StoreEventBuilder.container_loaded(container, record_count))

    def log_container_load_failed(self, container: str, error_message: str) -> None:
        self.log(StoreEventBuilder.container_load_failed(container, error_message))

    def log_snapshot_restored(self, record_counts: dict[str, int]) -> None:
        self.log(StoreEventBuilder.snapshot_restored(record_counts))

    def log_snapshot_restore_failed(self, error_message: str) -> None:
        self.log(StoreEventBuilder.snapshot_restore_failed(error_message))

    def log_persistence_failed(self, container: str, error_message: str) -> None:
        self.log(StoreEventBuilder.persistence_failed(container, error_message))

    def log_validation_failed(self, form: str, issues: list[dict]) -> None:
        self.log(StoreEventBuilder.validation_failed(form, issues))
