"""Logging middleware for InferDev API.

Logs every request and its response status and duration through the API
component logger.
"""

import time
from typing import Callable, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from inferdev.utils.logger import get_api_logger, log_api_request, log_api_response

logger = get_api_logger()

SESSION_SEGMENT = "sessions"


def session_id_from_path(path: str) -> Optional[str]:
    """Session ID in a .../sessions/{id}/... path; routing has not run yet."""
    parts = [part for part in path.split("/") if part]
    if SESSION_SEGMENT in parts:
        index = parts.index(SESSION_SEGMENT)
        if index + 1 < len(parts):
            return parts[index + 1]
    return None


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[List[str]] = None):
        """Initialize logging middleware.

        Args:
            app: The ASGI application
            exclude_paths: Path prefixes that are not logged
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/health", "/metrics", "/docs", "/openapi.json"]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return await call_next(request)

        start_time = time.perf_counter()
        log_api_request(request.method, path, session_id=session_id_from_path(path), logger=logger)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_api_response(request.method, path, response.status_code, duration_ms, logger=logger)
        return response
