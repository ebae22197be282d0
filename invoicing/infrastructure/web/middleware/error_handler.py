"""
Global error handling for the FastAPI application.
Maps domain exceptions to HTTP responses and catches everything else.
"""

import logging
import traceback
from typing import Any, Dict
from fastapi import FastAPI, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from invoicing.config import settings
from invoicing.domain.models.base import (
    DomainException,
    ExceedsBalanceError,
    BalanceInvariantError,
    EntityNotFoundError,
    DuplicateEntityError,
)

logger = logging.getLogger(__name__)


def status_code_for(exc: DomainException) -> int:
    """HTTP status for a domain exception. Order matters: subclasses first."""
    if isinstance(exc, BalanceInvariantError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, (ExceedsBalanceError, DuplicateEntityError)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, EntityNotFoundError):
        return status.HTTP_404_NOT_FOUND
    # Validation and business rule errors
    return status.HTTP_400_BAD_REQUEST


def domain_error_body(exc: DomainException) -> Dict[str, Any]:
    body = {
        "error": type(exc).__name__,
        "code": exc.code,
        "message": exc.message,
    }
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    return body


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")
    return JSONResponse(status_code=status_code, content=domain_error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain exception handler on the app."""
    app.add_exception_handler(DomainException, domain_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response = self.format_error_response(exc)

        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response.pop("status_code"),
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        if isinstance(exc, DomainException):
            # Raised outside a route, where the exception handler does not apply
            return {**domain_error_body(exc), "status_code": status_code_for(exc)}

        if isinstance(exc, TimeoutError):
            return {
                "error": "Request Timeout",
                "code": "TIMEOUT",
                "message": "The request took too long to process",
                "status_code": status.HTTP_503_SERVICE_UNAVAILABLE,
            }

        return {
            "error": "Internal Server Error",
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        }
