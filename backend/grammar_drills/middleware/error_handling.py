"""
Error Handling Middleware

Maps service exceptions to JSON error responses with a correlation id that
also appears in the log line.

Response shape:
    {"error": "<code>", "message": "...", "error_id": "ab12cd34",
     "details": {...} | null, "timestamp": "..."}

Exception taxonomy:
    - NotFoundError (404): topic or prompt version lookup miss
    - GenerationError (502): the LLM call filling the exercise cache failed
    - LLMError (502): raw provider failure below the generation layer
    - ValidationError (422): request is well-formed but not applicable
    - AuthorizationError (403): caller lacks the admin capability
    - Anything else (500): logged with traceback, sanitized response

Partial failures during cache fill and view tracking are not exceptions at
this level; they are logged where they happen and never reach the client.

Usage:
    from grammar_drills.middleware.error_handling import NotFoundError

    raise NotFoundError(f"Topic not found: {topic_id}")
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Carries the HTTP status code and a stable error code so handlers never
    have to translate exceptions themselves.

    Example:
        raise ServiceError("Database connection failed", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: int = None,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class LLMError(ServiceError):
    """LLM provider returned an error or an unusable response."""

    status_code = 502
    error_code = "llm_error"


class GenerationError(ServiceError):
    """
    Exercise generation failed as a whole.

    Raised for provider errors, timeouts, malformed JSON and responses
    without any exercises. Never retried by the exercise service.
    """

    status_code = 502
    error_code = "generation_failed"


class ValidationError(ServiceError):
    status_code = 422
    error_code = "validation_error"


class NotFoundError(ServiceError):
    status_code = 404
    error_code = "not_found"


class AuthorizationError(ServiceError):
    status_code = 403
    error_code = "forbidden"


# =============================================================================
# Error Handling Middleware
# =============================================================================


def _error_body(
    error_code: str,
    message: str,
    error_id: str,
    details: Optional[dict] = None,
) -> dict:
    return {
        "error": error_code,
        "message": message,
        "error_id": error_id,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    HTTPException is left to FastAPI. ServiceError becomes a structured
    response with its own status code; anything else becomes a 500 whose
    details are only exposed in debug mode.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            return await call_next(request)

        except HTTPException:
            raise

        except ServiceError as e:
            log = logger.warning if e.status_code < 500 else logger.error
            log(
                f"[{error_id}] {e.error_code}: {e.message}",
                extra={
                    "error_id": error_id,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            return JSONResponse(
                status_code=e.status_code,
                content=_error_body(
                    e.error_code,
                    e.message,
                    error_id,
                    e.details if self.debug else None,
                ),
            )

        except Exception as e:
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )
            details = None
            if self.debug:
                details = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }
            return JSONResponse(
                status_code=500,
                content=_error_body(
                    "internal_server_error",
                    "An unexpected error occurred",
                    error_id,
                    details,
                ),
            )


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include stack traces in responses
    """
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")
