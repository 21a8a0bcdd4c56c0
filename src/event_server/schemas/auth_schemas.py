"""Account schemas for registration, login and profile responses.

This module defines Pydantic schemas for user and admin authentication,
including request validation and response serialization. Password hashes
never appear in any response schema.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class RegisterRequest(BaseModel):
    """Schema for user and admin registration requests."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Login name (unique)",
        examples=["alice"]
    )
    password: str = Field(
        ...,
        min_length=6,
        description="Plain-text password (6 characters minimum)",
        examples=["s3cret-pass"]
    )
    email: EmailStr = Field(
        ...,
        description="Contact email address (unique)",
        examples=["alice@example.com"]
    )

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username."""
        if not v or v.isspace():
            raise ValueError('Username cannot be empty')
        return v.strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password."""
        if v.isspace():
            raise ValueError('Password cannot be whitespace only')
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f'Password cannot be longer than {MAX_PASSWORD_BYTES} bytes')
        return v


class LoginRequest(BaseModel):
    """Schema for user and admin login requests."""

    username: str = Field(..., min_length=1, max_length=50, description="Login name")
    password: str = Field(..., min_length=1, description="Plain-text password")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v or v.isspace():
            raise ValueError('Username cannot be empty')
        return v.strip()


class TokenType(str, Enum):
    """Enumeration for token types."""
    BEARER = "bearer"


class AccountSummary(BaseModel):
    """Public account information returned after login."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., gt=0, description="Account database ID", examples=[123])
    username: str = Field(..., description="Login name", examples=["alice"])
    email: str = Field(..., description="Contact email address", examples=["alice@example.com"])


class UserProfile(AccountSummary):
    """Schema for the authenticated user's profile."""

    created_at: datetime = Field(
        ...,
        description="Account creation timestamp",
        examples=["2024-01-01T00:00:00Z"]
    )


class UserRegisterResponse(BaseModel):
    """Response for a successful user registration."""

    message: str = Field(default="User created successfully")
    user_id: int = Field(..., gt=0, description="ID of the new user")


class AdminRegisterResponse(BaseModel):
    """Response for a successful admin registration."""

    message: str = Field(default="Admin created successfully")
    admin_id: int = Field(..., gt=0, description="ID of the new admin")


class TokenFields(BaseModel):
    """Access token fields shared by both login responses."""

    access_token: str = Field(
        ...,
        min_length=1,
        description="JWT access token",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    token_type: TokenType = Field(
        default=TokenType.BEARER,
        description="Token type (always 'bearer')"
    )
    expires_in: int = Field(
        ...,
        gt=0,
        description="Token expiration time in seconds",
        examples=[86400]
    )


class UserLoginResponse(TokenFields):
    """Response for a successful user login."""

    message: str = Field(default="Login successful")
    user: AccountSummary = Field(..., description="Authenticated user")
    can_sign_up_as_admin: bool = Field(
        default=True,
        description="Whether the client may offer the admin sign-up flow"
    )


class AdminLoginResponse(TokenFields):
    """Response for a successful admin login."""

    message: str = Field(default="Admin login successful")
    admin: AccountSummary = Field(..., description="Authenticated admin")


class RsvpResponse(BaseModel):
    """One of the authenticated user's RSVPs, with the event it belongs to."""

    id: int = Field(..., gt=0, description="RSVP ID")
    event_id: int = Field(..., gt=0, description="Event ID")
    title: str = Field(..., description="Event title")
    event_date: date = Field(..., description="Day the event takes place")
    created_at: datetime = Field(..., description="When the RSVP was made")
