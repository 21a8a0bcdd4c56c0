"""RSVP model: one user's confirmed intent to attend one event."""

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint, func
from sqlmodel import Column, DateTime, Field, Index, SQLModel


class Rsvp(SQLModel, table=True):
    """Association between a user and an event.

    A user can RSVP to a given event at most once.
    """

    __tablename__ = "rsvps"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Primary key (auto-generated)"
    )
    user_id: int = Field(
        foreign_key="users.id",
        description="ID of the attending user"
    )
    event_id: int = Field(
        foreign_key="events.id",
        description="ID of the event"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when the RSVP was made",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_rsvps_user_event"),
        Index("idx_rsvps_user_id", "user_id"),
        Index("idx_rsvps_event_id", "event_id"),
    )
