"""
Storage layer for the kbchat knowledge base.
"""
from .base import BaseStorage, StorageError
from .chats import ChatStorage
from .tags import TagStorage
from .knowledge_base import KnowledgeBaseStore
