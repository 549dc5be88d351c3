"""Store event logging package."""

from finance_tracker.events.logger import StoreEventLogger, configure_logging

__all__ = ["StoreEventLogger", "configure_logging"]
