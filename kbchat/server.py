"""
Application factory for the kbchat API.
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from langchain_core.language_models import BaseChatModel

from kbchat.api import chat, knowledge_base
from kbchat.config.app_config import API_PREFIX, TITLE_TEMPERATURE
from kbchat.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from kbchat.storage.base import StorageError
from kbchat.storage.knowledge_base import KnowledgeBaseStore
from kbchat.utils.custom_exceptions import ChatNotFoundError, ValidationError
from kbchat.utils.error_handlers import create_json_response
from kbchat.utils.logging_utils import logger
from kbchat.utils.paths import get_knowledge_base_dir


def create_app(
    chat_model: Optional[BaseChatModel] = None,
    title_model: Optional[BaseChatModel] = None,
    store: Optional[KnowledgeBaseStore] = None,
    api_prefix: str = API_PREFIX,
) -> FastAPI:
    """
    Build the FastAPI app.

    Collaborators that are not passed in are built from the environment:
    chat models through ``ModelManager`` and the store under KBCHAT_HOME.
    """
    if chat_model is None or title_model is None:
        from kbchat.agents.models import ModelManager
        manager = ModelManager()
        logger.info(f"Using endpoint '{manager.endpoint}' with model '{manager.model}'")
        if chat_model is None:
            chat_model = manager.create_chat_model()
        if title_model is None:
            title_model = manager.create_chat_model(temperature=TITLE_TEMPERATURE)

    if store is None:
        store = KnowledgeBaseStore(get_knowledge_base_dir())
        logger.info(f"Knowledge base stored in {store.base_dir}")

    app = FastAPI(title="kbchat")
    app.state.chat_model = chat_model
    app.state.title_model = title_model
    app.state.store = store

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)

    @app.exception_handler(ChatNotFoundError)
    async def chat_not_found_handler(request: Request, exc: ChatNotFoundError):
        logger.info(f"Chat not found: {exc.chat_id}")
        return create_json_response("Chat not found", exc.chat_id, status_code=404)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return create_json_response("Invalid request", str(exc), status_code=400)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Knowledge base storage error: {exc}")
        return create_json_response("Knowledge base storage error", str(exc), status_code=500)

    app.include_router(chat.router, prefix=api_prefix)
    app.include_router(knowledge_base.router, prefix=api_prefix)

    return app
