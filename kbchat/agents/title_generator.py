"""
Conversation title generation.

Title generation is a convenience: any provider failure or empty answer
yields a date-stamped placeholder instead of an error.
"""
from datetime import date
from typing import Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from kbchat.config.app_config import MAX_TITLE_LENGTH, TITLE_PROMPT_TEMPLATE, TITLE_SYSTEM_PROMPT
from kbchat.models.conversation import UIMessage
from kbchat.streaming.message_builder import chunk_text, format_conversation_summary
from kbchat.utils.logging_utils import logger


def fallback_title(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"Chat - {today.month}/{today.day}/{today.year}"


def clean_title(text: str) -> str:
    """First non-empty line, without wrapping quotes, capped at MAX_TITLE_LENGTH."""
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return ""
    title = lines[0].strip('"\'` ').strip()
    if len(title) > MAX_TITLE_LENGTH:
        title = title[:MAX_TITLE_LENGTH].rstrip()
    return title


async def generate_title(title_model: BaseChatModel, messages: Sequence[UIMessage]) -> str:
    summary = format_conversation_summary(messages)
    prompt = [
        SystemMessage(content=TITLE_SYSTEM_PROMPT),
        HumanMessage(content=TITLE_PROMPT_TEMPLATE.format(summary=summary)),
    ]

    try:
        response = await title_model.ainvoke(prompt)
    except Exception as e:
        logger.warning(f"Title generation failed, using fallback title: {e}")
        return fallback_title()

    title = clean_title(chunk_text(response.content))
    if not title:
        logger.warning("Model returned an empty title, using fallback title")
        return fallback_title()
    return title
