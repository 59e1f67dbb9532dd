"""
Chat storage implementation.

Each chat is one JSON document under ``chats/``.
"""
from pathlib import Path
from typing import Callable, Optional, List
import uuid
import time

from kbchat.utils.logging_utils import logger

from .base import BaseStorage, lock_path_for
from ..models.chat import Chat, ChatCreate


def current_time_ms() -> int:
    return int(time.time() * 1000)


class ChatStorage(BaseStorage[Chat]):
    """Storage for saved chats."""

    def __init__(self, base_dir: Path, clock: Callable[[], int] = current_time_ms):
        self.chats_dir = base_dir / "chats"
        super().__init__(self.chats_dir)
        self.clock = clock

    def _chat_file(self, chat_id: str) -> Path:
        return self.chats_dir / f"{chat_id}.json"

    def _is_valid_id(self, chat_id: str) -> bool:
        # Ids are generated uuids; anything else cannot name a stored chat
        try:
            uuid.UUID(chat_id)
        except (ValueError, TypeError):
            return False
        return True

    def get(self, chat_id: str) -> Optional[Chat]:
        if not self._is_valid_id(chat_id):
            return None
        data = self._read_json(self._chat_file(chat_id))
        if not data:
            return None
        return Chat(**data)

    def list(self) -> List[Chat]:
        chats = []
        for chat_file in self.chats_dir.glob("*.json"):
            data = self._read_json(chat_file)
            if data:
                chats.append(Chat(**data))
        return chats

    def create(self, data: ChatCreate, tags: List[str]) -> Chat:
        chat_id = str(uuid.uuid4())
        now = self.clock()

        chat = Chat(
            id=chat_id,
            title=data.title,
            messages=data.messages,
            highlightedQAIndex=data.highlightedQAIndex,
            tags=tags,
            isPinned=False,
            isFlagged=False,
            flagReason=None,
            createdAt=now,
            updatedAt=now
        )

        chat_file = self._chat_file(chat_id)
        with self._file_lock(chat_file):
            self._write_json(chat_file, chat.model_dump())
        logger.debug(f"Created chat {chat_id} with {len(chat.messages)} messages")
        return chat

    def update(self, chat_id: str, apply: Callable[[Chat], bool]) -> Optional[Chat]:
        """
        Apply ``apply`` to the stored chat under the chat's lock.

        ``apply`` mutates the chat in place and returns whether anything
        changed; only then is ``updatedAt`` bumped and the document written.
        Returns the chat as stored afterwards, or None if it does not exist.
        """
        if not self._is_valid_id(chat_id):
            return None
        chat_file = self._chat_file(chat_id)
        with self._file_lock(chat_file):
            data = self._read_json(chat_file)
            if not data:
                return None
            chat = Chat(**data)
            if apply(chat):
                chat.updatedAt = self.clock()
                self._write_json(chat_file, chat.model_dump())
            return chat

    def delete(self, chat_id: str) -> Optional[Chat]:
        if not self._is_valid_id(chat_id):
            return None
        chat_file = self._chat_file(chat_id)
        with self._file_lock(chat_file):
            data = self._read_json(chat_file)
            if not data:
                return None
            chat_file.unlink()
        lock_path_for(chat_file).unlink(missing_ok=True)
        return Chat(**data)
