"""
API endpoints for kbchat.
"""
# Re-export routers for easy import
from . import chat
from . import knowledge_base
