"""Request ID Middleware

Purpose: Generate and track X-Request-ID for request correlation

This middleware:
- Reuses the caller's X-Request-ID or generates a new one
- Stores it in ``request.state.request_id``, where route endpoints pick it
  up as the correlation id of their log entries
- Adds X-Request-ID and X-Processing-Time response headers
"""

import logging
import time
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add X-Request-ID and processing time headers."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        """Process request with ID generation and header addition."""
        request_id = request.headers.get(self.header_name) or str(uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        processing_time = time.time() - start_time

        response.headers[self.header_name] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}s"

        logger.debug(
            f"Request completed: {request.method} {request.url.path} "
            f"-> {response.status_code} ({processing_time:.3f}s) "
            f"[{request_id}]"
        )
        return response
