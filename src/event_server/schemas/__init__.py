"""Pydantic schemas for API validation and serialization.

This module exports all API schemas for account, item, event and payment
operations.
"""

from .auth_schemas import (
    AccountSummary,
    AdminLoginResponse,
    AdminRegisterResponse,
    LoginRequest,
    RegisterRequest,
    RsvpResponse,
    TokenType,
    UserLoginResponse,
    UserProfile,
    UserRegisterResponse,
)
from .event_schemas import (
    EventCreatedResponse,
    EventResponse,
    QrCodeResponse,
    RsvpResult,
)
from .item_schemas import ItemResponse
from .payment_schemas import PaymentRequest, PaymentResponse

__all__ = [
    # Account schemas
    "RegisterRequest",
    "LoginRequest",
    "AccountSummary",
    "UserProfile",
    "UserRegisterResponse",
    "AdminRegisterResponse",
    "UserLoginResponse",
    "AdminLoginResponse",
    "RsvpResponse",
    "TokenType",
    # Event schemas
    "EventResponse",
    "EventCreatedResponse",
    "RsvpResult",
    "QrCodeResponse",
    # Item schemas
    "ItemResponse",
    # Payment schemas
    "PaymentRequest",
    "PaymentResponse",
]
