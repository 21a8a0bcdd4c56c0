"""Event model.

This module defines the Event SQLModel: the events an admin publishes,
with their poster image URL, ticket price and RSVP counter.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Integer, Text, func
from sqlmodel import Column, DateTime, Field, Index, Numeric, SQLModel, String


class EventBase(SQLModel):
    """Base event model with common fields."""

    title: str = Field(
        min_length=1,
        max_length=200,
        description="Event title"
    )
    description: str = Field(
        min_length=1,
        max_length=5000,
        description="Event description"
    )
    event_date: date = Field(description="Day the event takes place")
    location: str = Field(
        min_length=1,
        max_length=255,
        description="Event venue"
    )


class Event(EventBase, table=True):
    """Event model for database storage.

    Attributes:
        id: Primary key (auto-generated)
        title: Event title
        description: Event description
        event_date: Day the event takes place
        location: Event venue
        poster_url: Public URL of the uploaded poster image
        price: Ticket price (0 for free events)
        rsvp_count: Number of RSVPs, only ever incremented
        created_at: Timestamp when the event was created
    """

    __tablename__ = "events"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Primary key (auto-generated)"
    )

    description: str = Field(
        description="Event description",
        sa_column=Column(Text, nullable=False)
    )

    poster_url: str = Field(
        description="Public URL of the poster image",
        sa_column=Column(String(1024), nullable=False)
    )

    price: Decimal = Field(
        default=Decimal("0.00"),
        description="Ticket price",
        sa_column=Column(Numeric(10, 2), nullable=False, server_default="0")
    )

    rsvp_count: int = Field(
        default=0,
        description="Number of RSVPs",
        sa_column=Column(Integer, nullable=False, server_default="0")
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when event was created",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        CheckConstraint("rsvp_count >= 0", name="ck_events_rsvp_count_non_negative"),
        CheckConstraint("price >= 0", name="ck_events_price_non_negative"),
        Index("idx_events_created_at", "created_at"),
        Index("idx_events_event_date", "event_date"),
    )


class EventCreate(EventBase):
    """Validated fields of a new event, before the poster is stored."""

    price: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Ticket price (0 for free events)"
    )
