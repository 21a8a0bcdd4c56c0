"""Custom exception classes and global exception handlers.

This module defines custom exception classes for different error types
and provides FastAPI global exception handlers for consistent error responses
with proper HTTP status codes and error message formatting.

Server-side failures (5xx) are answered with a generic message; the
underlying exception is only written to the log.
"""

import logging
import re
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIException(Exception):
    """Base exception class for API errors.

    This is the base class for all custom API exceptions, providing
    consistent error structure and HTTP status code handling.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for the error
            error_code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__.lower().replace(
            "exception", "_error"
        )
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationException(APIException):
    """Exception for authentication errors."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="authentication_error",
        )


class AuthorizationException(APIException):
    """Exception for authorization/permission errors."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="authorization_error",
        )


class DatabaseException(APIException):
    """Exception for database operation errors."""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: str | None = None,
    ) -> None:
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="database_error",
            details=details,
        )


def error_code_for(exc: Exception) -> str:
    """Derive a snake_case error code from an exception class name.

    ``EventNotFoundError`` becomes ``event_not_found_error``.
    """
    name = type(exc).__name__
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def create_error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create standardized error response.

    Args:
        status_code: HTTP status code
        message: Error message
        error_code: Machine-readable error code
        details: Additional error details
        request_id: Request ID for tracking
        headers: Extra response headers (e.g. ``WWW-Authenticate``)

    Returns:
        JSONResponse: Standardized error response
    """
    error_data = {
        "error": {"code": error_code, "message": message, "status_code": status_code}
    }

    if details:
        error_data["error"]["details"] = details

    if request_id:
        error_data["error"]["request_id"] = request_id

    return JSONResponse(status_code=status_code, content=error_data, headers=headers)


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "client_ip": request.client.host if request.client else None,
        "request_id": getattr(request.state, "request_id", None),
    }


# Global Exception Handlers


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handle custom API exceptions.

    Args:
        request: FastAPI request object
        exc: API exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"API Exception: {exc.error_code} - {exc.message}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "details": exc.details,
            **_request_context(request),
        },
    )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        request_id=getattr(request.state, "request_id", None),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions.

    Args:
        request: FastAPI request object
        exc: HTTP exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    logger.warning(
        f"HTTP Exception: {exc.status_code} - {exc.detail}",
        extra={"status_code": exc.status_code, **_request_context(request)},
    )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code="http_error",
        request_id=getattr(request.state, "request_id", None),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors.

    Missing, empty or malformed fields are client errors and are answered
    with 400 Bad Request.

    Args:
        request: FastAPI request object
        exc: Validation error instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    validation_errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        validation_errors.append(
            {
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.warning(
        f"Validation Error: {len(validation_errors)} field(s) failed validation",
        extra={"validation_errors": validation_errors, **_request_context(request)},
    )

    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message="Validation failed",
        error_code="validation_error",
        details={"validation_errors": validation_errors},
        request_id=getattr(request.state, "request_id", None),
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors that escaped the service layer."""
    logger.error(
        f"Database Exception: {type(exc).__name__}",
        exc_info=exc,
        extra={"exception_type": type(exc).__name__, **_request_context(request)},
    )

    return await api_exception_handler(request, DatabaseException())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Args:
        request: FastAPI request object
        exc: Exception instance

    Returns:
        JSONResponse: Generic error response
    """
    logger.error(
        f"Unexpected Exception: {type(exc).__name__} - {str(exc)}",
        exc_info=exc,
        extra={"exception_type": type(exc).__name__, **_request_context(request)},
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
        error_code="internal_error",
        request_id=getattr(request.state, "request_id", None),
    )
