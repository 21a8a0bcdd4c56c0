"""Logging configuration for structured logging.

This module provides structured logging configuration with proper log levels,
request/response logging middleware, security event logging, and helpers for
database and external service calls (object storage, SMTP relay).
"""

import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import Settings

APP_LOGGER = "event_server"

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
    }
)


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging.

    This formatter outputs log records as JSON objects with consistent
    structure including timestamp, level, message, and additional context.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS and value is not None
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str, ensure_ascii=False)


class RequestContextFilter(logging.Filter):
    """Logging filter to add request context to log records.

    Guarantees that request ID, client IP, account ID and role attributes
    exist on every record so format strings can reference them.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = getattr(record, "request_id", None)
        record.client_ip = getattr(record, "client_ip", None)
        record.account_id = getattr(record, "account_id", None)
        record.role = getattr(record, "role", None)
        record.path = getattr(record, "path", None)
        record.method = getattr(record, "method", None)
        return True


def setup_logging(settings: Settings) -> None:
    """Setup logging configuration based on settings.

    Args:
        settings: Application settings containing logging configuration
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    formatter = "simple" if settings.debug else "json"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": JSONFormatter,
            },
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "filters": {
            "request_context": {
                "()": RequestContextFilter,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": formatter,
                "filters": ["request_context"],
                "stream": sys.stdout,
            }
        },
        "loggers": {
            APP_LOGGER: {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {
                "level": "INFO" if settings.debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "fastapi": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if settings.debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.pool": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            # boto3 is chatty at INFO
            "botocore": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "boto3": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "passlib": {"level": "ERROR", "handlers": ["console"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }

    logging.config.dictConfig(logging_config)

    logger = logging.getLogger(APP_LOGGER)
    logger.info(
        "Logging configured",
        extra={
            "log_level": settings.log_level,
            "debug_mode": settings.debug,
            "formatter": formatter,
        },
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging.

    This middleware logs incoming requests and outgoing responses with
    timing information, status codes, and request context, and tags every
    response with an ``X-Request-ID`` header.
    """

    def __init__(self, app: ASGIApp, logger_name: str = f"{APP_LOGGER}.requests") -> None:
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else None
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()

        start_time = time.time()

        self.logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": client_ip,
                "user_agent": request.headers.get("User-Agent"),
                "content_type": request.headers.get("Content-Type"),
                "content_length": request.headers.get("Content-Length"),
                "event_type": "request_started",
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            process_time = time.time() - start_time
            self.logger.error(
                f"Request failed: {request.method} {request.url.path} - {type(exc).__name__}",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "exception_type": type(exc).__name__,
                    "process_time": round(process_time, 4),
                    "client_ip": client_ip,
                    "account_id": getattr(request.state, "account_id", None),
                    "event_type": "request_failed",
                },
            )
            raise

        process_time = time.time() - start_time
        self.logger.info(
            f"Request completed: {request.method} {request.url.path} - {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time": round(process_time, 4),
                "client_ip": client_ip,
                "account_id": getattr(request.state, "account_id", None),
                "role": getattr(request.state, "role", None),
                "response_size": response.headers.get("Content-Length"),
                "event_type": "request_completed",
            },
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


class SecurityLoggingMixin:
    """Mixin for security-related logging.

    This mixin provides methods for logging security events like
    authentication attempts and authorization failures.
    """

    def __init__(self) -> None:
        self.security_logger = logging.getLogger(f"{APP_LOGGER}.security")

    def log_authentication_attempt(
        self,
        username: str | None = None,
        role: str | None = None,
        success: bool = True,
        reason: str | None = None,
        account_id: int | None = None,
    ) -> None:
        """Log authentication attempt.

        Args:
            username: Username supplied by the client
            role: Account type being authenticated (user or admin)
            success: Whether authentication was successful
            reason: Reason for failure (if applicable)
            account_id: Internal account ID on success
        """
        level = logging.INFO if success else logging.WARNING
        message = (
            "Authentication successful"
            if success
            else f"Authentication failed: {reason}"
        )

        self.security_logger.log(
            level,
            message,
            extra={
                "event_type": "authentication_attempt",
                "username": username,
                "role": role,
                "account_id": account_id,
                "success": success,
                "reason": reason,
            },
        )

    def log_authorization_failure(
        self,
        account_id: int | None = None,
        required_role: str | None = None,
        actual_role: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Log authorization failure."""
        self.security_logger.warning(
            f"Authorization denied: {reason}",
            extra={
                "event_type": "authorization_failure",
                "account_id": account_id,
                "required_role": required_role,
                "actual_role": actual_role,
                "reason": reason,
            },
        )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance namespaced under the application logger.

    Args:
        name: Logger name (``event_server.`` is prepended when missing)

    Returns:
        Logger instance
    """
    if not name.startswith(f"{APP_LOGGER}."):
        name = f"{APP_LOGGER}.{name}"

    return logging.getLogger(name)


def log_database_operation(
    operation: str,
    table: str,
    success: bool = True,
    duration: float | None = None,
    error: str | None = None,
    **kwargs: Any,
) -> None:
    """Log database operation.

    Args:
        operation: Type of operation (SELECT, INSERT, UPDATE, DELETE)
        table: Database table name
        success: Whether operation was successful
        duration: Operation duration in seconds
        error: Error message (if applicable)
        **kwargs: Additional context data
    """
    logger = get_logger("database")
    level = logging.INFO if success else logging.ERROR
    message = f"Database {operation} on {table}"

    if not success and error:
        message += f" failed: {error}"

    extra_data = {
        "event_type": "database_operation",
        "operation": operation,
        "table": table,
        "success": success,
        "duration": duration,
    }

    if error:
        extra_data["error"] = error

    extra_data.update(kwargs)

    logger.log(level, message, extra=extra_data)


def log_external_api_call(
    service: str,
    endpoint: str,
    method: str = "GET",
    status_code: int | None = None,
    duration: float | None = None,
    success: bool = True,
    error: str | None = None,
    **kwargs: Any,
) -> None:
    """Log a call to an external service (object storage, SMTP relay).

    Args:
        service: External service name
        endpoint: Endpoint, bucket/key or host contacted
        method: Operation performed
        status_code: Response status code, when the protocol has one
        duration: Request duration in seconds
        success: Whether request was successful
        error: Error message (if applicable)
        **kwargs: Additional context data
    """
    logger = get_logger("external_api")
    level = logging.INFO if success else logging.ERROR
    message = f"External API call to {service}: {method} {endpoint}"

    if status_code:
        message += f" - {status_code}"

    if not success and error:
        message += f" failed: {error}"

    extra_data = {
        "event_type": "external_api_call",
        "service": service,
        "endpoint": endpoint,
        "method": method,
        "status_code": status_code,
        "duration": duration,
        "success": success,
    }

    if error:
        extra_data["error"] = error

    extra_data.update(kwargs)

    logger.log(level, message, extra=extra_data)
