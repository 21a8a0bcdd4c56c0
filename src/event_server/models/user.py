"""Account models for users and admins.

Users and admins are stored in separate tables with the same shape:
a unique username, a unique email and a bcrypt password hash.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlmodel import Column, DateTime, Field, SQLModel, String


class AccountBase(SQLModel):
    """Fields shared by users and admins."""

    username: str = Field(
        min_length=1,
        max_length=50,
        description="Login name (unique per account table)"
    )
    email: str = Field(
        max_length=255,
        description="Contact email address (unique per account table)"
    )


class User(AccountBase, table=True):
    """Regular user account.

    Attributes:
        id: Primary key (auto-generated)
        username: Unique login name
        email: Unique email address
        password_hash: bcrypt hash of the password
        created_at: Timestamp when the account was created
    """

    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Primary key (auto-generated)"
    )

    username: str = Field(
        max_length=50,
        description="Login name",
        sa_column=Column(String(50), unique=True, nullable=False, index=True)
    )
    email: str = Field(
        max_length=255,
        description="Email address",
        sa_column=Column(String(255), unique=True, nullable=False, index=True)
    )
    password_hash: str = Field(
        description="bcrypt password hash",
        sa_column=Column(String(255), nullable=False)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when user was created",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )


class Admin(AccountBase, table=True):
    """Privileged account with its own registration and login flow."""

    __tablename__ = "admins"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Primary key (auto-generated)"
    )

    username: str = Field(
        max_length=50,
        description="Login name",
        sa_column=Column(String(50), unique=True, nullable=False, index=True)
    )
    email: str = Field(
        max_length=255,
        description="Email address",
        sa_column=Column(String(255), unique=True, nullable=False, index=True)
    )
    password_hash: str = Field(
        description="bcrypt password hash",
        sa_column=Column(String(255), nullable=False)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when admin was created",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
