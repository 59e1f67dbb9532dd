"""
Centralized error handling utilities for the application.
This module provides consistent error payloads across all endpoints.
"""

import json
from typing import Dict, Any, Optional
from fastapi.responses import JSONResponse
from starlette.requests import Request

# Error type reported by the middleware
ERROR_SERVER = "server_error"


def is_streaming_request(request: Request) -> bool:
    """Check if the client asked for an event stream."""
    return "text/event-stream" in request.headers.get("accept", "").lower()


def create_json_response(
    error: str, details: Optional[str] = None, status_code: int = 500, headers: Dict[str, str] = None
) -> JSONResponse:
    """Create a JSON response of the form {error, details}."""
    content: Dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details if isinstance(details, str) else str(details)
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def format_sse(payload: Any) -> str:
    """Format one Server-Sent Events data frame."""
    if isinstance(payload, str):
        return f"data: {payload}\n\n"
    return f"data: {json.dumps(payload)}\n\n"


def create_sse_error_event(detail: Any) -> str:
    """Create an SSE error frame in the UI message stream format."""
    if isinstance(detail, BaseException):
        # Some provider errors carry no message
        detail = str(detail) or type(detail).__name__
    elif not isinstance(detail, str):
        detail = str(detail)
    return format_sse({"type": "error", "errorText": detail})

