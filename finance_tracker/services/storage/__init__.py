"""
Storage Services Package

Provides the abstract document storage interface and its implementations.
The record store only ever sees DocumentStorageInterface.
"""

from finance_tracker.services.storage.interface import (
    ContainerKey,
    DocumentStorageInterface,
    NotFoundError,
    ParseError,
    PersistenceWarning,
    StorageError,
)
from finance_tracker.services.storage.json_files import JsonFileDocumentStorage
from finance_tracker.services.storage.memory import InMemoryDocumentStorage

__all__ = [
    # Interface
    "ContainerKey",
    "DocumentStorageInterface",
    # Exceptions and warnings
    "NotFoundError",
    "ParseError",
    "PersistenceWarning",
    "StorageError",
    # Implementations
    "InMemoryDocumentStorage",
    "JsonFileDocumentStorage",
]
