"""
Knowledge-base operations over the chats and tags collections.

Every mutation that changes which chats reference a tag also adjusts that
tag's count, so that ``tag.count`` always equals the number of stored chats
whose tag list contains ``tag.name``.
"""
from pathlib import Path
from typing import Callable, List, Optional

from kbchat.config.app_config import FILTER_OPTIONS, SORT_OPTIONS
from kbchat.utils.custom_exceptions import ChatNotFoundError, ValidationError
from kbchat.utils.logging_utils import logger

from .chats import ChatStorage, current_time_ms
from .tags import TagStorage
from ..models.chat import Chat, ChatCreate
from ..models.tag import Tag


def normalize_tags(tags: List[str]) -> List[str]:
    """Strip names, drop blanks and drop repeats, keeping first-seen order."""
    seen = []
    for tag in tags:
        name = tag.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def _matches_search(chat: Chat, term: str) -> bool:
    return (
        term in chat.title.lower()
        or any(term in m.content.lower() for m in chat.messages)
        or any(term in t.lower() for t in chat.tags)
    )


def sort_chats(chats: List[Chat], sort: str = "recent") -> List[Chat]:
    if sort == "oldest":
        return sorted(chats, key=lambda c: c.createdAt)
    if sort == "alphabetical":
        return sorted(chats, key=lambda c: c.title.lower())
    if sort == "messagecount":
        return sorted(chats, key=lambda c: len(c.messages), reverse=True)
    # recent: pinned first, then newest first
    return sorted(chats, key=lambda c: (not c.isPinned, -c.createdAt))


class KnowledgeBaseStore:
    """The knowledge base: saved chats plus the tag usage counts derived from them."""

    def __init__(self, base_dir: Path, clock: Callable[[], int] = current_time_ms):
        self.base_dir = base_dir
        self.chats = ChatStorage(base_dir, clock=clock)
        self.tags = TagStorage(base_dir)

    def list_tags(self) -> List[Tag]:
        return self.tags.list()

    def list_chats(
        self,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        sort: str = "recent",
        filter_by: str = "all",
    ) -> List[Chat]:
        """
        List chats that have not been flagged.

        Args:
            tag: only chats carrying this tag
            search: case-insensitive substring of the title, any message or any tag
            limit: maximum number of chats to return
            sort: one of ``SORT_OPTIONS``; ``recent`` puts pinned chats first
            filter_by: one of ``FILTER_OPTIONS``

        Returns:
            The matching chats in the requested order.
        """
        if sort not in SORT_OPTIONS:
            raise ValidationError(f"Unknown sort option '{sort}'")
        if filter_by not in FILTER_OPTIONS:
            raise ValidationError(f"Unknown filter option '{filter_by}'")
        if limit is not None and limit < 1:
            raise ValidationError("limit must be a positive integer")

        results = [c for c in self.chats.list() if not c.isFlagged]

        if tag:
            results = [c for c in results if tag in c.tags]

        if search:
            term = search.lower()
            results = [c for c in results if _matches_search(c, term)]

        if filter_by == "pinned":
            results = [c for c in results if c.isPinned]
        elif filter_by == "unpinned":
            results = [c for c in results if not c.isPinned]

        results = sort_chats(results, sort)

        if limit:
            results = results[:limit]
        return results

    def get_chat(self, chat_id: str) -> Chat:
        chat = self.chats.get(chat_id)
        if not chat:
            raise ChatNotFoundError(chat_id)
        return chat

    def save_chat(self, data: ChatCreate) -> Chat:
        tags = normalize_tags(data.tags)
        chat = self.chats.create(data, tags)
        for tag in tags:
            self.tags.adjust_count(tag, 1)
        logger.info(f"Saved chat {chat.id} '{chat.title}' with tags {tags}")
        return chat

    def toggle_pin(self, chat_id: str) -> Chat:
        def flip(chat: Chat) -> bool:
            chat.isPinned = not chat.isPinned
            return True

        chat = self.chats.update(chat_id, flip)
        if not chat:
            raise ChatNotFoundError(chat_id)
        return chat

    def flag_chat(self, chat_id: str, reason: str) -> Chat:
        def flag(chat: Chat) -> bool:
            chat.isFlagged = True
            chat.flagReason = reason
            return True

        chat = self.chats.update(chat_id, flag)
        if not chat:
            raise ChatNotFoundError(chat_id)
        logger.info(f"Flagged chat {chat_id}: {reason}")
        return chat

    def delete_chat(self, chat_id: str) -> Chat:
        chat = self.chats.delete(chat_id)
        if not chat:
            raise ChatNotFoundError(chat_id)
        for tag in chat.tags:
            self.tags.adjust_count(tag, -1)
        logger.info(f"Deleted chat {chat_id}")
        return chat

    def add_tag_to_chat(self, chat_id: str, tag: str) -> Chat:
        name = tag.strip()
        if not name:
            raise ValidationError("Tag name must not be blank")
        added = False

        def add(chat: Chat) -> bool:
            nonlocal added
            if name in chat.tags:
                return False
            chat.tags.append(name)
            added = True
            return True

        chat = self.chats.update(chat_id, add)
        if not chat:
            raise ChatNotFoundError(chat_id)
        if added:
            self.tags.adjust_count(name, 1)
        return chat

    def remove_tag_from_chat(self, chat_id: str, tag: str) -> Chat:
        name = tag.strip()
        removed = False

        def remove(chat: Chat) -> bool:
            nonlocal removed
            removed = name in chat.tags
            chat.tags = [t for t in chat.tags if t != name]
            return True

        chat = self.chats.update(chat_id, remove)
        if not chat:
            raise ChatNotFoundError(chat_id)
        # A tag the chat never carried has no count to give back
        if removed:
            self.tags.adjust_count(name, -1)
        return chat
