"""
Middleware for handling errors.
"""

from fastapi import Request, Response
from fastapi.responses import StreamingResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from kbchat.utils.error_handlers import (
    ERROR_SERVER, create_json_response, create_sse_error_event, format_sse, is_streaming_request
)
from kbchat.utils.logging_utils import logger

class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns any exception escaping a route into a structured 500 response."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Handle errors."""
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"ErrorHandlingMiddleware caught: {str(e)}")

            if is_streaming_request(request):
                async def error_stream():
                    yield create_sse_error_event(e)
                    yield format_sse("[DONE]")

                return StreamingResponse(
                    error_stream(),
                    media_type="text/event-stream",
                    status_code=500,
                    headers={"Cache-Control": "no-cache"}
                )

            return create_json_response(ERROR_SERVER, str(e), status_code=500)
