"""
Data models for the kbchat knowledge base and chat relay.
"""
from .chat import Chat, ChatCreate, Message, FlagRequest, TagRequest
from .conversation import UIMessage, UIMessagePart, ConversationRequest
from .tag import Tag, TagsFile
