#!/usr/bin/env python3
"""
Streaming Handler
Relays a streamed chat completion to the client as UI message stream events.

Wire format, one JSON object per SSE ``data:`` frame:
    start, text-start, text-delta*, text-end, finish, then ``[DONE]``.
A provider failure after the stream has started is reported as an ``error``
frame before ``[DONE]``; text already sent is never retracted.
"""

from typing import AsyncGenerator, AsyncIterator, List, Optional
import uuid

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage

from kbchat.streaming.message_builder import chunk_text
from kbchat.utils.error_handlers import create_sse_error_event, format_sse
from kbchat.utils.logging_utils import logger

UI_MESSAGE_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
    "x-vercel-ai-ui-message-stream": "v1",
}


def generate_message_id() -> str:
    return f"msg-{uuid.uuid4().hex}"


class StreamingHandler:
    """Relays one streamed completion. Create one handler per request."""

    def __init__(self, chat_model: BaseChatModel, message_id: Optional[str] = None):
        self.chat_model = chat_model
        self.message_id = message_id or generate_message_id()
        self._fragments: Optional[AsyncIterator[str]] = None
        self._first: Optional[str] = None

    async def _text_fragments(self, messages: List[BaseMessage]) -> AsyncGenerator[str, None]:
        async for chunk in self.chat_model.astream(messages):
            text = chunk_text(chunk.content)
            if text:
                yield text

    async def start(self, messages: List[BaseMessage]) -> None:
        """
        Open the provider stream and wait for its first fragment.

        Raises whatever the provider raises, so that a failure to open the
        stream can still be answered with a plain error response.
        """
        self._fragments = self._text_fragments(messages)
        try:
            self._first = await self._fragments.__anext__()
        except StopAsyncIteration:
            self._first = None
        logger.debug(f"Stream {self.message_id} opened")

    async def stream_response(self) -> AsyncGenerator[str, None]:
        """Yield SSE frames for the stream opened by ``start``."""
        if self._fragments is None:
            raise RuntimeError("start() must be called before stream_response()")

        message_id = self.message_id
        yield format_sse({"type": "start", "messageId": message_id})
        yield format_sse({"type": "text-start", "id": message_id})

        fragment_count = 0
        try:
            if self._first is not None:
                fragment_count += 1
                yield format_sse({"type": "text-delta", "id": message_id, "delta": self._first})
            async for fragment in self._fragments:
                fragment_count += 1
                yield format_sse({"type": "text-delta", "id": message_id, "delta": fragment})
        except Exception as e:
            logger.error(f"Stream {message_id} failed after {fragment_count} fragments: {e}")
            yield format_sse({"type": "text-end", "id": message_id})
            yield create_sse_error_event(e)
            yield format_sse("[DONE]")
            return
        finally:
            await self._fragments.aclose()

        logger.debug(f"Stream {message_id} finished with {fragment_count} fragments")
        yield format_sse({"type": "text-end", "id": message_id})
        yield format_sse({"type": "finish"})
        yield format_sse("[DONE]")
