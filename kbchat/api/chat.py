"""
Chat relay and title generation endpoints.
"""
import json
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from langchain_core.language_models import BaseChatModel
from pydantic import ValidationError as PydanticValidationError

from ..agents.title_generator import generate_title
from ..models.conversation import ConversationRequest, UIMessage
from ..streaming.handler import StreamingHandler, UI_MESSAGE_STREAM_HEADERS
from ..streaming.message_builder import build_messages_for_streaming
from ..utils.custom_exceptions import ValidationError
from ..utils.error_handlers import create_json_response
from ..utils.logging_utils import logger
from .dependencies import get_chat_model, get_title_model

router = APIRouter(tags=["chat"])

NO_MESSAGES = "No messages provided"


async def read_conversation(request: Request) -> List[UIMessage]:
    """
    Parse ``{messages: [...]}`` from the request body.

    Raises ValidationError when the body is not JSON, when ``messages`` is
    missing or empty, or when a message is malformed.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Request body is not valid JSON: {e}")

    if not isinstance(body, dict) or not body.get("messages"):
        raise ValidationError(NO_MESSAGES)

    try:
        return ConversationRequest(**body).messages
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed messages: {e.errors(include_url=False)}")


@router.post("/chat")
async def chat_endpoint(request: Request, chat_model: BaseChatModel = Depends(get_chat_model)):
    """Stream the model's answer to the conversation as UI message stream events."""
    try:
        messages = await read_conversation(request)
        model_messages = build_messages_for_streaming(messages)
    except ValidationError as e:
        logger.warning(f"Rejected chat request: {e}")
        return create_json_response("Invalid chat request", str(e), status_code=400)

    logger.info(f"Chat request with {len(messages)} messages")
    handler = StreamingHandler(chat_model)
    try:
        await handler.start(model_messages)
    except Exception as e:
        logger.error(f"Chat API error: {e}")
        return create_json_response("Failed to process chat request", str(e), status_code=500)

    return StreamingResponse(
        handler.stream_response(),
        media_type="text/event-stream",
        headers=UI_MESSAGE_STREAM_HEADERS
    )


@router.post("/generate-title")
async def generate_title_endpoint(request: Request, title_model: BaseChatModel = Depends(get_title_model)):
    """Generate a short title for a conversation, falling back to a dated placeholder."""
    try:
        messages = await read_conversation(request)
    except ValidationError as e:
        if str(e) == NO_MESSAGES:
            return JSONResponse({"error": NO_MESSAGES}, status_code=400)
        return create_json_response("Invalid title request", str(e), status_code=400)

    title = await generate_title(title_model, messages)
    logger.debug(f"Generated title: {title}")
    return {"title": title}
