"""
Knowledge-base chat models.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Literal

class Message(BaseModel):
    model_config = {"extra": "ignore"}

    id: str
    role: Literal["user", "assistant"]
    content: str

class Chat(BaseModel):
    model_config = {"extra": "ignore"}

    id: str
    title: str
    messages: List[Message] = []
    # Index of the Q&A pair that was saved
    highlightedQAIndex: int
    tags: List[str] = []
    isPinned: bool = False
    isFlagged: bool = False
    flagReason: Optional[str] = None
    createdAt: int
    updatedAt: int

class ChatCreate(BaseModel):
    title: str
    messages: List[Message]
    highlightedQAIndex: int
    tags: List[str] = []

class FlagRequest(BaseModel):
    reason: str

class TagRequest(BaseModel):
    tag: str = Field(..., min_length=1)
