"""Error handler middleware for InferDev API.

This middleware catches application exceptions escaping the routers and
turns them into the standard error envelope.
"""

import traceback
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from inferdev.utils.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    InferDevError,
    NoQuestionsAvailableError,
    ResourceNotFoundError,
    SurveyStateError,
    ValidationError,
    create_error_response,
)
from inferdev.utils.logger import get_api_logger

logger = get_api_logger()


def status_code_for(error: InferDevError) -> int:
    """HTTP status for an application error."""
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, ResourceNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, (SurveyStateError, NoQuestionsAvailableError)):
        return status.HTTP_409_CONFLICT
    if isinstance(error, ExternalServiceError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(error, ConfigurationError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def application_error_response(error: InferDevError, request: Request, debug: bool = False) -> JSONResponse:
    """Log an application error and render its envelope."""
    request_id = getattr(request.state, "request_id", None) or str(uuid4())
    status_code = status_code_for(error)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Application error: {error.message}",
        extra={
            "request_id": request_id,
            "error_code": error.error_code,
            "error_type": error.__class__.__name__,
            "status_code": status_code,
            "path": request.url.path,
            "method": request.method,
        }
    )

    # Configuration details name internal settings
    include_details = debug or not isinstance(error, ConfigurationError)
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(error, request_id=request_id, include_details=include_details),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware to handle exceptions and format error responses."""

    def __init__(self, app: ASGIApp, debug: bool = False):
        """Initialize error handler middleware.

        Args:
            app: The ASGI application
            debug: Whether to include detailed error info
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except InferDevError as e:
            return application_error_response(e, request, debug=self.debug)

        except Exception as e:
            request_id = getattr(request.state, "request_id", None) or str(uuid4())
            logger.error(
                f"Unexpected error: {str(e)}",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "method": request.method,
                    "error_type": type(e).__name__,
                    "traceback": traceback.format_exc(),
                },
                exc_info=True
            )

            content = {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(e) if self.debug else "An unexpected error occurred",
                    "request_id": request_id,
                }
            }
            return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
