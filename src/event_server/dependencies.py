"""FastAPI dependencies for authentication and database access.

This module provides dependency injection functions for FastAPI endpoints,
including authentication, role checks, database sessions, external service
clients and service instances.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header
from sqlmodel import Session

from .config import Settings, get_settings
from .database import get_session
from .exceptions import AuthenticationException, AuthorizationException
from .services.account_service import AccountService
from .services.auth_service import AuthenticationError, AuthService, Role, TokenPayload
from .services.event_service import EventService
from .services.item_service import ItemService
from .services.mail_service import Mailer, create_mailer
from .services.payment_service import PaymentService
from .services.storage_service import StorageClient, create_storage_client


# Dependency for getting application settings
def get_app_settings() -> Settings:
    """Get application settings.

    Returns:
        Settings: Application configuration
    """
    return get_settings()


# Dependency for getting authentication service
def get_auth_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthService:
    """Get authentication service instance.

    Args:
        settings: Application settings

    Returns:
        AuthService: Authentication service instance
    """
    return AuthService(settings)


# External clients are built once per process
@lru_cache
def get_storage_client() -> StorageClient:
    """Get the poster storage client selected in settings."""
    return create_storage_client(get_settings())


@lru_cache
def get_mailer() -> Mailer:
    """Get the outgoing mail transport selected in settings."""
    return create_mailer(get_settings())


def get_account_service(
    session: Annotated[Session, Depends(get_session)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AccountService:
    """Get account service instance."""
    return AccountService(session, auth_service)


def get_item_service(session: Annotated[Session, Depends(get_session)]) -> ItemService:
    """Get item service instance."""
    return ItemService(session)


def get_event_service(
    session: Annotated[Session, Depends(get_session)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> EventService:
    """Get event service instance."""
    return EventService(session, storage, settings)


def get_payment_service(
    session: Annotated[Session, Depends(get_session)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PaymentService:
    """Get payment service instance."""
    return PaymentService(session, mailer, settings)


# Dependency for JWT token validation
async def get_token_payload(
    authorization: Annotated[str | None, Header()] = None,
    auth_service: Annotated[AuthService, Depends(get_auth_service)] = None,
) -> TokenPayload:
    """Get the verified token payload of the request.

    Args:
        authorization: Authorization header with Bearer token
        auth_service: Authentication service instance

    Returns:
        TokenPayload: Verified token claims

    Raises:
        AuthenticationException: If the token is missing or invalid (401)
    """
    try:
        return auth_service.authenticate_header(authorization)
    except AuthenticationError as e:
        raise AuthenticationException(e.message) from e


def _require_role(
    payload: TokenPayload, role: Role, auth_service: AuthService
) -> TokenPayload:
    if payload.role != role:
        auth_service.log_authorization_failure(
            account_id=payload.account_id,
            required_role=role,
            actual_role=payload.role,
            reason="role mismatch",
        )
        raise AuthorizationException(f"This endpoint requires the {role} role")
    return payload


async def get_current_user(
    payload: Annotated[TokenPayload, Depends(get_token_payload)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenPayload:
    """Require a user token.

    Raises:
        AuthenticationException: Missing or invalid token (401)
        AuthorizationException: Token issued to an admin (403)
    """
    return _require_role(payload, "user", auth_service)


async def get_current_admin(
    payload: Annotated[TokenPayload, Depends(get_token_payload)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenPayload:
    """Require an admin token.

    Raises:
        AuthenticationException: Missing or invalid token (401)
        AuthorizationException: Token issued to a user (403)
    """
    return _require_role(payload, "admin", auth_service)


# Optional authentication dependency (for endpoints that work with or without auth)
async def get_current_user_optional(
    authorization: Annotated[str | None, Header()] = None,
    auth_service: Annotated[AuthService, Depends(get_auth_service)] = None,
) -> TokenPayload | None:
    """Get the user token payload if one is present and valid, None otherwise.

    Admin tokens and unusable credentials are treated as anonymous.
    """
    if not authorization:
        return None

    try:
        payload = auth_service.authenticate_header(authorization)
    except AuthenticationError:
        return None
    return payload if payload.role == "user" else None


# Type aliases for common dependency patterns
CurrentUser = Annotated[TokenPayload, Depends(get_current_user)]
CurrentAdmin = Annotated[TokenPayload, Depends(get_current_admin)]
CurrentUserOptional = Annotated[TokenPayload | None, Depends(get_current_user_optional)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
ItemServiceDep = Annotated[ItemService, Depends(get_item_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
