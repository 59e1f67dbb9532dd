"""
Tag storage implementation.

All tags live in a single ``tags.json`` document. Count changes go through
``adjust_count`` so that the read, the arithmetic and the write happen inside
one locked section.
"""
from pathlib import Path
from typing import Optional, List
import uuid

from kbchat.utils.logging_utils import logger

from .base import BaseStorage
from ..models.tag import Tag, TagsFile


class TagStorage(BaseStorage[Tag]):
    """Storage for knowledge-base tags, keyed by name."""

    def __init__(self, base_dir: Path):
        super().__init__(base_dir)
        self.tags_file = base_dir / "tags.json"

    def _read_tags_file(self) -> TagsFile:
        data = self._read_json(self.tags_file)
        if data is None:
            return TagsFile(version=1, tags=[])
        return TagsFile(**data)

    def _write_tags_file(self, tags_file: TagsFile) -> None:
        self._write_json(self.tags_file, tags_file.model_dump())

    def get(self, name: str) -> Optional[Tag]:
        for tag in self._read_tags_file().tags:
            if tag.name == name:
                return tag
        return None

    def list(self) -> List[Tag]:
        """All tags, most used first."""
        tags = self._read_tags_file().tags
        return sorted(tags, key=lambda t: (-t.count, t.name))

    def adjust_count(self, name: str, delta: int) -> Optional[Tag]:
        """
        Atomically add ``delta`` to the count of tag ``name``.

        A missing tag is created when ``delta`` is positive. A tag whose
        count would fall to zero or below is deleted. Returns the tag as
        stored afterwards, or None if it no longer exists.
        """
        with self._file_lock(self.tags_file):
            tags_file = self._read_tags_file()
            existing = next((t for t in tags_file.tags if t.name == name), None)

            if existing is None:
                if delta <= 0:
                    logger.debug(f"Tag '{name}' not found, nothing to decrement")
                    return None
                tag = Tag(id=str(uuid.uuid4()), name=name, count=delta)
                tags_file.tags.append(tag)
                self._write_tags_file(tags_file)
                logger.debug(f"Created tag '{name}' with count {delta}")
                return tag

            new_count = existing.count + delta
            if new_count <= 0:
                tags_file.tags = [t for t in tags_file.tags if t.name != name]
                self._write_tags_file(tags_file)
                logger.debug(f"Deleted tag '{name}' (count reached {new_count})")
                return None

            existing.count = new_count
            self._write_tags_file(tags_file)
            return existing

