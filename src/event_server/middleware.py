"""Middleware for request processing and authentication context.

This module provides FastAPI middleware for security headers and for
attaching the caller's identity to the request state. Request logging lives
in ``logging_config.LoggingMiddleware``.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import get_settings
from .logging_config import get_logger
from .services.auth_service import AuthenticationError, AuthService

logger = get_logger("middleware")


class AuthenticationContextMiddleware(BaseHTTPMiddleware):
    """Middleware for adding authentication context to requests.

    This middleware extracts and validates JWT tokens from requests,
    adding account context to the request state for logging.
    It does not enforce authentication - that's handled by dependencies.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.auth_service = AuthService(get_settings())

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add authentication context to request.

        Args:
            request: HTTP request
            call_next: Next middleware/endpoint in chain

        Returns:
            Response: HTTP response
        """
        request.state.account_id = None
        request.state.role = None
        request.state.is_authenticated = False

        authorization = request.headers.get("authorization")

        if authorization:
            try:
                payload = self.auth_service.authenticate_header(authorization)

                request.state.account_id = payload.account_id
                request.state.role = payload.role
                request.state.is_authenticated = True

            except AuthenticationError as e:
                # Enforcement is left to the endpoint dependencies
                logger.debug(f"Ignoring unusable credentials: {e.message}")

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware for adding security headers.

    This middleware adds common security headers to all responses
    to improve application security posture.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # The interactive docs need scripts and styles
        if not request.url.path.startswith(("/docs", "/redoc")):
            response.headers["Content-Security-Policy"] = "default-src 'none'"

        return response

