"""
Abstract Storage Interface

DESIGN DECISION: The record store talks to persistence through a tiny
key/document interface: save a text document under a key, load it back.
This allows us to:
1. Use in-memory storage for testing
2. Keep files on disk for the desktop case
3. Keep the record store ignorant of where documents live

One key per container; the document is that container's JSON array.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class ContainerKey(str, Enum):
    """Storage key of each record container."""
    TRANSACTIONS = "transactions"
    INCOME_STREAMS = "incomeStreams"
    RECURRING_PAYMENTS = "recurringPayments"
    SAVINGS = "savings"


class DocumentStorageInterface(ABC):
    """
    Abstract interface for document storage.

    Any storage implementation (files, browser storage, a database)
    must implement these methods.
    """

    @abstractmethod
    def save(self, key: str, document: str) -> None:
        """
        Store a document under a key, replacing any previous one.

        Args:
            key: Container key
            document: Serialized container

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Retrieve the document stored under a key.

        Args:
            key: Container key

        Returns:
            The document if one was saved, None otherwise

        Raises:
            StorageError: If the document exists but cannot be read
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Record not found in the store."""
    pass


class ParseError(StorageError):
    """A persisted document or snapshot could not be understood."""

    def __init__(self, message: str, container: Optional[str] = None):
        super().__init__(message)
        self.container = container


class PersistenceWarning(UserWarning):
    """A write-through failed; in-memory data is still authoritative."""
    pass
