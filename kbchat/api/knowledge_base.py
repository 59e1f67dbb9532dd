"""
Knowledge-base API endpoints: saved chats, tags, pinning and flagging.
"""
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from ..models.chat import Chat, ChatCreate, FlagRequest, TagRequest
from ..models.tag import Tag
from ..storage.knowledge_base import KnowledgeBaseStore
from .dependencies import get_store

router = APIRouter(prefix="/kb", tags=["knowledge-base"])

# Tags

@router.get("/tags", response_model=List[Tag])
async def list_tags(store: KnowledgeBaseStore = Depends(get_store)):
    """List all tags, most used first."""
    return store.list_tags()

# Chats

@router.get("/chats", response_model=List[Chat])
async def list_chats(
    tag: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    sort: Literal["recent", "oldest", "alphabetical", "messagecount"] = Query("recent"),
    filter_by: Literal["all", "pinned", "unpinned"] = Query("all", alias="filter"),
    store: KnowledgeBaseStore = Depends(get_store)
):
    """List saved chats that have not been flagged."""
    return store.list_chats(tag=tag, search=search, limit=limit, sort=sort, filter_by=filter_by)

@router.post("/chats", response_model=Chat)
async def save_chat(data: ChatCreate, store: KnowledgeBaseStore = Depends(get_store)):
    """Save a chat session into the knowledge base."""
    return store.save_chat(data)

@router.get("/chats/{chat_id}", response_model=Chat)
async def get_chat(chat_id: str, store: KnowledgeBaseStore = Depends(get_store)):
    """Get a saved chat including its messages."""
    return store.get_chat(chat_id)

@router.delete("/chats/{chat_id}", response_model=Chat)
async def delete_chat(chat_id: str, store: KnowledgeBaseStore = Depends(get_store)):
    """Delete a chat and give back its tag counts."""
    return store.delete_chat(chat_id)

@router.post("/chats/{chat_id}/pin", response_model=Chat)
async def toggle_pin(chat_id: str, store: KnowledgeBaseStore = Depends(get_store)):
    """Pin or unpin a chat."""
    return store.toggle_pin(chat_id)

@router.post("/chats/{chat_id}/flag", response_model=Chat)
async def flag_chat(chat_id: str, data: FlagRequest, store: KnowledgeBaseStore = Depends(get_store)):
    """Flag a chat; flagged chats drop out of listings."""
    return store.flag_chat(chat_id, data.reason)

@router.post("/chats/{chat_id}/tags", response_model=Chat)
async def add_tag_to_chat(chat_id: str, data: TagRequest, store: KnowledgeBaseStore = Depends(get_store)):
    """Add a tag to a chat. Adding a tag the chat already has changes nothing."""
    return store.add_tag_to_chat(chat_id, data.tag)

@router.delete("/chats/{chat_id}/tags/{tag:path}", response_model=Chat)
async def remove_tag_from_chat(chat_id: str, tag: str, store: KnowledgeBaseStore = Depends(get_store)):
    """Remove a tag from a chat."""
    return store.remove_tag_from_chat(chat_id, tag)
