"""FastAPI application entry point.

This module initializes the FastAPI application with all routers,
middleware, database lifecycle management, configuration, logging,
and global exception handlers for consistent error responses.
"""

import logging
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import settings
from .database import lifespan
from .exceptions import (
    APIException,
    api_exception_handler,
    database_exception_handler,
    error_code_for,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .logging_config import LoggingMiddleware, setup_logging
from .middleware import AuthenticationContextMiddleware, SecurityHeadersMiddleware
from .routers import (
    accounts_router,
    db_check_router,
    events_router,
    health_router,
    items_router,
    payments_router,
)
from .services.account_service import AccountServiceError
from .services.auth_service import AuthenticationError
from .services.event_service import EventServiceError
from .services.item_service import ItemServiceError
from .services.payment_service import PaymentServiceError

# Configure logger for this module
logger = logging.getLogger(__name__)

# Initialize logging before creating the app
setup_logging(settings)
logger.info("Starting FastAPI application initialization")

# Every service error carries ``message`` and ``status_code``
SERVICE_ERRORS = (
    AuthenticationError,
    AccountServiceError,
    ItemServiceError,
    EventServiceError,
    PaymentServiceError,
)


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    This function creates the FastAPI application instance with all necessary
    configuration including middleware, exception handlers, and routers.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Event Server",
        description="Event management API: events, RSVPs, tickets, payments and accounts",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/docs" if settings.debug else None,  # Disable docs in production
        redoc_url="/redoc" if settings.debug else None,  # Disable redoc in production
        openapi_url="/openapi.json"
        if settings.debug
        else None,  # Disable OpenAPI in production
    )

    logger.info("FastAPI application created with basic configuration")

    # Configure middleware stack (order matters!)
    configure_middleware(app)

    # Register exception handlers
    configure_exception_handlers(app)

    # Register routers
    configure_routers(app)

    # Add root endpoint
    configure_root_endpoints(app)

    logger.info("FastAPI application configuration completed")
    return app


def configure_middleware(app: FastAPI) -> None:
    """Configure middleware stack for the application.

    Middleware added last runs first, so the request logger wraps everything
    except CORS and the host check, and sees the account set by the
    authentication context middleware.

    Args:
        app: FastAPI application instance
    """
    logger.info("Configuring middleware stack")

    app.add_middleware(AuthenticationContextMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)

    configure_cors_middleware(app)

    # Trusted host middleware for production security
    if settings.is_production:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)
        logger.info(
            f"Trusted host middleware configured with hosts: {settings.allowed_hosts}"
        )

    logger.info("Middleware stack configuration completed")


def configure_cors_middleware(app: FastAPI) -> None:
    """Configure CORS middleware based on environment.

    Args:
        app: FastAPI application instance
    """
    if settings.is_development:
        # Development: Allow all origins for easier testing
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.info("CORS configured for development (allow all origins)")
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
            expose_headers=["X-Request-ID"],
            max_age=86400,  # Cache preflight requests for 24 hours
        )
        logger.info(
            f"CORS configured for {settings.environment} with origins: "
            f"{settings.cors_allowed_origins}"
        )


async def service_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle service-specific exceptions by converting to APIException."""
    api_exc = APIException(
        message=exc.message,
        status_code=exc.status_code,
        error_code=error_code_for(exc),
    )
    original_error = getattr(exc, "original_error", None)
    if original_error is not None and api_exc.status_code >= 500:
        logger.error(
            f"Service failure caused by {type(original_error).__name__}",
            exc_info=original_error,
        )
    return await api_exception_handler(request, api_exc)


def configure_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers.

    Args:
        app: FastAPI application instance
    """
    logger.info("Configuring exception handlers")

    app.add_exception_handler(APIException, api_exception_handler)
    # Starlette raises its own HTTPException for unknown routes
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    for error_class in SERVICE_ERRORS:
        app.add_exception_handler(error_class, service_exception_handler)

    app.add_exception_handler(SQLAlchemyError, database_exception_handler)

    # Register generic exception handler (must be last)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers configuration completed")


def configure_routers(app: FastAPI) -> None:
    """Configure and register API routers.

    Args:
        app: FastAPI application instance
    """
    logger.info("Configuring API routers")

    app.include_router(health_router)
    app.include_router(db_check_router)
    app.include_router(accounts_router)
    app.include_router(events_router)
    app.include_router(payments_router)
    app.include_router(items_router)

    logger.info("API routers registered successfully")


def configure_root_endpoints(app: FastAPI) -> None:
    """Configure root and utility endpoints.

    Args:
        app: FastAPI application instance
    """

    @app.get("/", tags=["root"], summary="API Information")
    async def root() -> dict[str, Any]:
        """Root endpoint providing API information.

        Returns:
            Dict[str, Any]: API information
        """
        return {
            "message": "Event Server is running",
            "version": __version__,
            "environment": settings.environment,
            "debug": settings.debug,
            "docs": "/docs" if settings.debug else None,
            "health": "/api/health",
            "endpoints": {
                "health": "/api/health",
                "accounts": "/api/register",
                "events": "/api/events",
                "payments": "/api/pay",
                "items": "/api/items",
            },
        }

    @app.get("/version", tags=["root"], summary="API Version")
    async def version() -> dict[str, str]:
        """Get API version information.

        Returns:
            Dict[str, str]: Version information
        """
        return {"version": __version__, "environment": settings.environment}

    logger.info("Root endpoints configured")


# Create the FastAPI application instance
app = create_app()

# Log application startup
logger.info(
    "FastAPI application initialized successfully",
    extra={
        "environment": settings.environment,
        "debug": settings.debug,
        "database": settings.safe_database_url,
    },
)


def run() -> None:
    """Serve the application with uvicorn (``event-server`` console script)."""
    uvicorn.run(
        "event_server.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_config=None,
    )
