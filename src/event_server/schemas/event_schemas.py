"""Event schemas for listing, creation, RSVP and ticket responses."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class EventResponse(BaseModel):
    """Schema for event API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., gt=0, description="Event ID", examples=[42])
    title: str = Field(..., description="Event title", examples=["Spring Meetup"])
    description: str = Field(..., description="Event description")
    event_date: date = Field(..., description="Day the event takes place", examples=["2025-04-12"])
    location: str = Field(..., description="Event venue", examples=["Main Hall"])
    poster_url: str = Field(..., description="Public URL of the poster image")
    price: float = Field(..., ge=0, description="Ticket price", examples=[15.0])
    rsvp_count: int = Field(..., ge=0, description="Number of RSVPs")
    created_at: datetime = Field(..., description="Event creation timestamp")


class EventCreatedResponse(BaseModel):
    """Response for a successful event upload."""

    message: str = Field(default="Event created successfully")
    event_id: int = Field(..., gt=0, description="ID of the new event")
    event: EventResponse


class RsvpResult(BaseModel):
    """Response for a successful RSVP."""

    message: str = Field(default="RSVP successful")
    event_id: int = Field(..., gt=0)
    rsvp_count: int = Field(..., ge=1, description="RSVP count after this RSVP")


class QrCodeResponse(BaseModel):
    """QR ticket for an event as a base64 encoded PNG."""

    event_id: int = Field(..., gt=0)
    qr_code_base64: str = Field(..., description="PNG image, base64 encoded")
