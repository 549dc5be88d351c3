"""
JSON File Storage Implementation

Each container is stored as ``<data_dir>/<key>.json``. A person can open
the files and read their data directly; there is no database to set up.

TRADEOFFS:
- Whole-container rewrites on every change (fine for personal volumes)
- Last write wins; there is no locking between processes

Writes go to a temporary file in the same directory and then replace the
target, so a crash mid-write leaves the previous document intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import get_settings
from finance_tracker.services.storage.interface import (
    DocumentStorageInterface,
    StorageError,
)


class JsonFileDocumentStorage(DocumentStorageInterface):
    """
    File-per-container implementation of document storage.

    Transient OS errors on write are retried with exponential backoff.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        write_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._data_dir = Path(data_dir) if data_dir is not None else settings.data_dir
        self._write_attempts = write_attempts or settings.write_attempts

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Get the file a container key is stored in."""
        return self._data_dir / f"{key}.json"

    def save(self, key: str, document: str) -> None:
        retrying = Retrying(
            retry=retry_if_exception_type(OSError),
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, max=2),
            reraise=True,
        )
        try:
            retrying(self._write, self.path_for(key), document)
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def _write(self, path: Path, document: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}-",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
