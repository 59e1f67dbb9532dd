"""
Middleware for the kbchat API.
"""

from kbchat.middleware.error_handling import ErrorHandlingMiddleware
from kbchat.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["ErrorHandlingMiddleware", "RequestLoggingMiddleware"]
