"""
JSON document storage on the local filesystem.

Every document is guarded by an exclusive ``fcntl`` lock on a sidecar
``<name>.lock`` file. Writers replace the document by rename, so readers
never observe a partially written file.
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Generic, Iterator, List, Optional, TypeVar
import fcntl
import json
import os

from kbchat.utils.logging_utils import logger

T = TypeVar('T')


class StorageError(Exception):
    """Raised when a stored document cannot be read."""
    pass


def lock_path_for(filepath: Path) -> Path:
    return filepath.with_name(filepath.name + '.lock')


class BaseStorage(ABC, Generic[T]):
    """Base class for collections kept as JSON documents under one directory."""

    def __init__(self, base_path: Path):
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _file_lock(self, filepath: Path) -> Iterator[None]:
        """
        Hold an exclusive lock for ``filepath`` across a read-modify-write.

        The lock lives on a sidecar file because writes replace the data
        file by rename, which would orphan a lock held on the data file.
        """
        lock_path = lock_path_for(filepath)
        with open(lock_path, 'a') as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read_json(self, filepath: Path) -> Optional[dict]:
        """Load a document, or None if it does not exist."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt document {filepath}: {e}")
            raise StorageError(f"Corrupt document {filepath.name}: {e}") from e

    def _write_json(self, filepath: Path, data: dict) -> None:
        """Replace a document in one rename; callers hold its lock."""
        temp_path = filepath.with_name(f".{filepath.name}.tmp")
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_path, filepath)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    @abstractmethod
    def get(self, key: str) -> Optional[T]:
        """Get one document by its key."""

    @abstractmethod
    def list(self) -> List[T]:
        """Every document in the collection."""
