"""Events router.

This module provides the public event listing, the admin-only event upload
and deletion, user RSVPs and QR tickets.
"""

from decimal import Decimal
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, File, Form, Path, Query, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..config import Settings
from ..dependencies import (
    CurrentAdmin,
    CurrentUser,
    CurrentUserOptional,
    EventServiceDep,
    get_app_settings,
)
from ..models.event import EventCreate
from ..schemas.event_schemas import (
    EventCreatedResponse,
    EventResponse,
    QrCodeResponse,
    RsvpResult,
)

router = APIRouter(
    prefix="/api",
    tags=["events"],
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Event not found"},
        500: {"description": "Internal server error"},
    },
)

EventId = Annotated[int, Path(gt=0, description="Event ID")]


def event_form(
    title: Annotated[str, Form(description="Event title")],
    description: Annotated[str, Form(description="Event description")],
    location: Annotated[str, Form(description="Event venue")],
    event_date: Annotated[str, Form(description="Day of the event (YYYY-MM-DD)")],
    price: Annotated[Decimal | None, Form(description="Ticket price, defaults to 0")] = None,
) -> EventCreate:
    """Validate the multipart event fields.

    Raises:
        RequestValidationError: If a field is empty or malformed (answered with 400)
    """
    try:
        return EventCreate(
            title=title,
            description=description,
            location=location,
            event_date=event_date,
            price=price if price is not None else Decimal("0"),
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_context=False)) from e


@router.get(
    "/events",
    response_model=list[EventResponse],
    summary="List events",
    description="All events, most recently created first",
)
async def list_events(event_service: EventServiceDep) -> list[EventResponse]:
    return await event_service.list_events()


@router.get(
    "/events/{event_id}",
    response_model=EventResponse,
    summary="Get event",
)
async def get_event(event_id: EventId, event_service: EventServiceDep) -> EventResponse:
    return await event_service.get_event(event_id)


@router.post(
    "/admin/upload-event",
    response_model=EventCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload event",
    description="Create an event with a poster image (admin only)",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not an admin token"},
        503: {"description": "Poster storage unavailable"},
    },
)
async def upload_event(
    current_admin: CurrentAdmin,
    event_data: Annotated[EventCreate, Depends(event_form)],
    poster: Annotated[UploadFile, File(description="Poster image (PNG, JPEG, GIF or WebP)")],
    event_service: EventServiceDep,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> EventCreatedResponse:
    """Create an event.

    Only one byte more than the upload limit is read, so oversized posters
    are rejected without buffering them whole.
    """
    data = await poster.read(settings.max_upload_bytes + 1)
    return await event_service.create_event(
        event_data,
        poster=data,
        content_type=poster.content_type,
        filename=poster.filename,
    )


@router.post(
    "/events/{event_id}/rsvp",
    response_model=RsvpResult,
    status_code=status.HTTP_201_CREATED,
    summary="RSVP to an event",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not a user token"},
    },
)
async def rsvp_event(
    event_id: EventId,
    current_user: CurrentUser,
    event_service: EventServiceDep,
) -> RsvpResult:
    """RSVP the authenticated user to an upcoming event.

    Past events and repeated RSVPs are rejected with 400.
    """
    return await event_service.rsvp(event_id, current_user.account_id)


@router.get(
    "/events/{event_id}/qrcode",
    response_model=QrCodeResponse,
    summary="Event QR ticket",
    description=(
        "QR ticket for the event as base64 JSON, or as a PNG with ?format=png. "
        "A user token adds the attendee to the ticket."
    ),
    responses={200: {"content": {"image/png": {}}}},
)
async def event_qrcode(
    event_id: EventId,
    current_user: CurrentUserOptional,
    event_service: EventServiceDep,
    response_format: Annotated[Literal["json", "png"], Query(alias="format")] = "json",
):
    user_id = current_user.account_id if current_user else None

    if response_format == "png":
        png = await event_service.ticket_png(event_id, user_id)
        return Response(
            content=png,
            media_type="image/png",
            headers={"Content-Disposition": f'inline; filename="event_{event_id}.png"'},
        )

    qr_code = await event_service.ticket_base64(event_id, user_id)
    return QrCodeResponse(event_id=event_id, qr_code_base64=qr_code)


@router.delete(
    "/events/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event",
    description="Delete an event and its RSVPs (admin only)",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not an admin token"},
    },
)
async def delete_event(
    event_id: EventId,
    current_admin: CurrentAdmin,
    event_service: EventServiceDep,
) -> Response:
    await event_service.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
