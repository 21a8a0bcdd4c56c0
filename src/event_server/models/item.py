"""Item model for the generic JSON items resource.

Items are opaque JSON documents; the server assigns the id and timestamps
and never inspects the payload.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, func
from sqlmodel import Column, DateTime, Field, SQLModel


class Item(SQLModel, table=True):
    """Item model for database storage.

    Attributes:
        id: Primary key (auto-generated)
        data: Arbitrary JSON value supplied by the client
        created_at: Timestamp when item was created
        updated_at: Timestamp when item was last replaced
    """

    __tablename__ = "items"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Primary key (auto-generated)"
    )

    data: Any = Field(
        default=None,
        description="Client supplied JSON document",
        sa_column=Column(JSON, nullable=True)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when item was created",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    updated_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when item was last updated",
        sa_column=Column(DateTime(timezone=True), onupdate=func.now())
    )
