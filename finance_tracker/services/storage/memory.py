"""
In-Memory Document Storage

Holds documents in a dictionary for the lifetime of the object, the same
way browser local storage holds them for a page. Used by tests and by
callers that persist the snapshot themselves.
"""

from typing import Optional

from finance_tracker.services.storage.interface import DocumentStorageInterface


class InMemoryDocumentStorage(DocumentStorageInterface):
    """Dictionary-backed implementation of document storage."""

    def __init__(self, documents: Optional[dict[str, str]] = None):
        self._documents: dict[str, str] = dict(documents or {})

    def save(self, key: str, document: str) -> None:
        self._documents[key] = document

    def load(self, key: str) -> Optional[str]:
        return self._documents.get(key)

    def keys(self) -> list[str]:
        return list(self._documents)
