#!/usr/bin/env python3
"""
Message Builder
Converts dashboard messages into LangChain chat messages and text summaries.
"""

from typing import List, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from kbchat.config.app_config import CHAT_SYSTEM_PROMPT, TITLE_SNIPPET_LENGTH
from kbchat.models.conversation import UIMessage
from kbchat.utils.custom_exceptions import ValidationError
from kbchat.utils.logging_utils import logger


def build_messages_for_streaming(messages: Sequence[UIMessage], system_prompt: str = CHAT_SYSTEM_PROMPT) -> List[BaseMessage]:
    """
    Build the provider conversation: the system prompt followed by every
    message that carries text, in order.
    """
    result: List[BaseMessage] = [SystemMessage(content=system_prompt)]

    for msg in messages:
        text = msg.text
        if not text.strip():
            logger.debug(f"Skipping empty {msg.role} message {msg.id or ''}")
            continue

        if msg.role == "user":
            result.append(HumanMessage(content=text))
        elif msg.role == "assistant":
            result.append(AIMessage(content=text))
        else:
            result.append(SystemMessage(content=text))

    if len(result) == 1:
        raise ValidationError("Conversation contains no message text")
    return result


def format_conversation_summary(messages: Sequence[UIMessage], snippet_length: int = TITLE_SNIPPET_LENGTH) -> str:
    """One ``role: text`` line per message, each text cut to ``snippet_length`` characters."""
    return "\n".join(f"{msg.role}: {msg.text[:snippet_length]}" for msg in messages)


def chunk_text(content) -> str:
    """Extract the text of a streamed chunk; providers send either a string or content blocks."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""
