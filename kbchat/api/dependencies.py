"""
FastAPI dependencies for dependency injection.

The chat models and the knowledge-base store are built once by the app
factory and kept on ``app.state``; handlers receive them through these
providers so tests can substitute fakes.
"""

from fastapi import Request
from langchain_core.language_models import BaseChatModel

from kbchat.storage.knowledge_base import KnowledgeBaseStore


def get_chat_model(request: Request) -> BaseChatModel:
    """Get the model used for streamed chat answers."""
    return request.app.state.chat_model


def get_title_model(request: Request) -> BaseChatModel:
    """Get the model used for title generation."""
    return request.app.state.title_model


def get_store(request: Request) -> KnowledgeBaseStore:
    """Get the knowledge-base store."""
    return request.app.state.store
