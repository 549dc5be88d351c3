"""
Data Models Package

This package contains all Pydantic models used by the finance tracker.
Every record the store holds conforms to these schemas.
"""

from finance_tracker.models.records import (
    DEFAULT_CATEGORIES,
    MONTH_KEY_PATTERN,
    OPEN_ENDED_DATE,
    Frequency,
    IncomeStream,
    Money,
    MonthKey,
    Record,
    RecurringPayment,
    Savings,
    Transaction,
    TransactionType,
)
from finance_tracker.models.events import (
    EventSeverity,
    StoreEvent,
    StoreEventBuilder,
    StoreEventType,
)

__all__ = [
    # Records
    "DEFAULT_CATEGORIES",
    "MONTH_KEY_PATTERN",
    "OPEN_ENDED_DATE",
    "Frequency",
    "IncomeStream",
    "Money",
    "MonthKey",
    "Record",
    "RecurringPayment",
    "Savings",
    "Transaction",
    "TransactionType",
    # Events
    "EventSeverity",
    "StoreEvent",
    "StoreEventBuilder",
    "StoreEventType",
]
