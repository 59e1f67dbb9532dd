"""
General application configuration for kbchat.

This module contains application-wide settings that are not specific to models.
It should be importable without triggering any side effects or initializations.
"""
import os

# Server configuration
DEFAULT_PORT = 6969
DEFAULT_HOST = "127.0.0.1"

# All routes are mounted under this prefix
API_PREFIX = os.getenv("KBCHAT_API_PREFIX", "/api")

# Chat relay
CHAT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant for an internal team dashboard. "
    "Provide clear, concise, and useful answers. Keep responses focused and actionable."
)

# Title generation
TITLE_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates concise, descriptive titles for chat conversations. "
    "Generate a short title (5-8 words max) that captures the main topic of the conversation. "
    "Return ONLY the title, nothing else."
)
TITLE_PROMPT_TEMPLATE = "Generate a title for this chat conversation:\n\n{summary}"
TITLE_TEMPERATURE = 0.7
TITLE_SNIPPET_LENGTH = 100
MAX_TITLE_LENGTH = 100

# Knowledge base listing
SORT_OPTIONS = ("recent", "oldest", "alphabetical", "messagecount")
FILTER_OPTIONS = ("all", "pinned", "unpinned")
