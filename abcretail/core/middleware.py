"""
Correlation ID middleware and error handlers for the web application.

Extracts or generates a correlation ID per request, stores it in the logging
context and echoes it on the response. Storage failures render an error page.
"""

import logging
import time
import uuid

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .exceptions import StorageOperationError
from .logging_config import clear_correlation_id, get_correlation_id, set_correlation_id
from .templating import render_template

logger = logging.getLogger(__name__)


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle correlation ID extraction and propagation."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        """Process request and inject correlation ID."""
        correlation_id = request.headers.get('x-correlation-id') or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        start_time = time.time()
        try:
            response: Response = await call_next(request)
            response.headers['x-correlation-id'] = correlation_id

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.2f} ms)"
            )
            return response
        finally:
            clear_correlation_id()


async def storage_error_handler(request: Request, exc: StorageOperationError) -> Response:
    """Render a failed remote storage call as a 502 error page."""
    logger.error(f"Storage operation failed for {request.method} {request.url.path}: {exc.message}")
    return render_template(
        request,
        "error.html",
        status_code=status.HTTP_502_BAD_GATEWAY,
        title="Storage operation failed",
        error=exc.to_dict()["error"],
        correlation_id=get_correlation_id(),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Render any unexpected exception as a 500 error page."""
    logger.error(f"Unhandled error for {request.method} {request.url.path}", exc_info=exc)
    return render_template(
        request,
        "error.html",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        title="Unexpected error",
        error={"code": type(exc).__name__, "message": "An unexpected error occurred.", "details": {}},
        correlation_id=get_correlation_id(),
    )


def register_exception_handlers(app) -> None:
    """Register the storage and generic exception handlers on a FastAPI app."""
    app.add_exception_handler(StorageOperationError, storage_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
