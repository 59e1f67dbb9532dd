"""
Tag models.
"""
from pydantic import BaseModel
from typing import List, Optional

class Tag(BaseModel):
    id: str
    name: str
    # Number of chats whose tag list contains this name
    count: int
    color: Optional[str] = None

class TagsFile(BaseModel):
    """On-disk layout of the tags collection."""
    version: int = 1
    tags: List[Tag] = []
