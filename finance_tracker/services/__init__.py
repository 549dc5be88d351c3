"""Services package."""

from finance_tracker.services.storage import (
    ContainerKey,
    DocumentStorageInterface,
    InMemoryDocumentStorage,
    JsonFileDocumentStorage,
    NotFoundError,
    ParseError,
    PersistenceWarning,
    StorageError,
)

__all__ = [
    "ContainerKey",
    "DocumentStorageInterface",
    "InMemoryDocumentStorage",
    "JsonFileDocumentStorage",
    "NotFoundError",
    "ParseError",
    "PersistenceWarning",
    "StorageError",
]
