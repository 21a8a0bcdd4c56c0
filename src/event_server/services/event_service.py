"""Event service for business logic operations.

This module provides business logic for events: publishing an event with its
poster, listing and lookup, RSVPs, QR tickets and deletion.
"""

from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from ..config import Settings
from ..logging_config import get_logger, log_database_operation
from ..models.event import Event, EventCreate
from ..repositories.event_repository import EventNotFoundError, EventRepository
from ..repositories.rsvp_repository import RsvpAlreadyExistsError, RsvpRepository
from ..repositories.user_repository import AccountRepositoryError, UserRepository
from ..schemas.event_schemas import EventCreatedResponse, EventResponse, RsvpResult
from .storage_service import IMAGE_EXTENSIONS, StorageClient, StorageError, build_object_key
from .ticket_service import build_ticket_payload, render_qr_base64, render_qr_png

logger = get_logger("event_service")


class EventServiceError(Exception):
    """Base exception for event service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        original_error: Exception | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(self.message)


class EventNotFoundServiceError(EventServiceError):
    """Exception raised when event is not found."""

    def __init__(self, event_id: int) -> None:
        super().__init__(f"Event with id {event_id} not found", status_code=404)


class PosterValidationError(EventServiceError):
    """Exception raised when the uploaded poster is unusable."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=400)


class PastEventError(EventServiceError):
    """Exception raised when RSVPing to an event that already took place."""

    def __init__(self, event_id: int) -> None:
        super().__init__(
            f"Event with id {event_id} has already taken place", status_code=400
        )


class DuplicateRsvpError(EventServiceError):
    """Exception raised when a user RSVPs to the same event twice."""

    def __init__(self, event_id: int) -> None:
        super().__init__(
            f"You have already RSVPed to event {event_id}", status_code=400
        )


class AttendeeNotFoundError(EventServiceError):
    """Exception raised when the RSVPing user no longer exists."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with id {user_id} not found", status_code=404)


class EventService:
    """Service for event business logic operations."""

    def __init__(self, session: Session, storage: StorageClient, settings: Settings) -> None:
        """Initialize event service.

        Args:
            session: SQLModel database session
            storage: Object storage receiving poster images
            settings: Application settings (upload limits, key prefix)
        """
        self.session = session
        self.storage = storage
        self.settings = settings
        self.event_repository = EventRepository(session)
        self.rsvp_repository = RsvpRepository(session)
        self.user_repository = UserRepository(session)

    async def create_event(
        self,
        event_data: EventCreate,
        poster: bytes,
        content_type: str | None,
        filename: str | None = None,
    ) -> EventCreatedResponse:
        """Upload the poster and store a new event.

        Args:
            event_data: Validated event fields
            poster: Raw poster image
            content_type: Declared MIME type of the poster
            filename: Client-side file name of the poster

        Returns:
            Created event response

        Raises:
            PosterValidationError: If the poster is empty, too large or not an image
            EventServiceError: If the upload or the insert fails
        """
        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type not in IMAGE_EXTENSIONS:
            raise PosterValidationError(
                f"Poster must be one of: {', '.join(sorted(IMAGE_EXTENSIONS))}"
            )
        if not poster:
            raise PosterValidationError("Poster file is empty")
        if len(poster) > self.settings.max_upload_bytes:
            raise PosterValidationError(
                f"Poster exceeds the maximum size of {self.settings.max_upload_bytes} bytes"
            )

        key = build_object_key(self.settings.storage_key_prefix, media_type, filename)
        try:
            poster_url = await run_in_threadpool(
                self.storage.upload_bytes, poster, key, media_type
            )
        except StorageError as e:
            logger.error(f"Poster upload failed for key {key}", exc_info=True)
            raise EventServiceError(
                "Poster storage is temporarily unavailable",
                status_code=503,
                original_error=e,
            ) from e

        try:
            event = self.event_repository.create(event_data, poster_url)
        except SQLAlchemyError as e:
            log_database_operation(
                operation="INSERT", table="events", success=False, error=type(e).__name__
            )
            logger.error(
                "Database error creating event; poster left in storage",
                exc_info=True,
                extra={"poster_url": poster_url},
            )
            raise EventServiceError(
                "Failed to create event", status_code=500, original_error=e
            ) from e

        log_database_operation(
            operation="INSERT", table="events", success=True, event_id=event.id
        )
        logger.info(
            f"Event {event.id} created",
            extra={"event_id": event.id, "poster_url": poster_url},
        )
        return EventCreatedResponse(
            event_id=event.id, event=EventResponse.model_validate(event)
        )

    async def list_events(self) -> list[EventResponse]:
        """Get all events, newest first.

        Raises:
            EventServiceError: If operation fails
        """
        try:
            events = self.event_repository.get_all()
        except SQLAlchemyError as e:
            logger.error("Database error listing events", exc_info=True)
            raise EventServiceError(
                "Failed to fetch events", status_code=500, original_error=e
            ) from e

        return [EventResponse.model_validate(event) for event in events]

    async def get_event(self, event_id: int) -> EventResponse:
        """Get one event.

        Raises:
            EventNotFoundServiceError: If event is not found
        """
        event = await self.get_event_model(event_id)
        return EventResponse.model_validate(event)

    async def get_event_model(self, event_id: int) -> Event:
        """Load the event row or raise.

        Raises:
            EventNotFoundServiceError: If event is not found
            EventServiceError: If operation fails
        """
        try:
            return self.event_repository.get_by_id_or_raise(event_id)
        except EventNotFoundError as e:
            raise EventNotFoundServiceError(event_id) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error reading event {event_id}", exc_info=True)
            raise EventServiceError(
                "Failed to fetch event", status_code=500, original_error=e
            ) from e

    async def delete_event(self, event_id: int) -> bool:
        """Delete an event and its RSVPs.

        Raises:
            EventNotFoundServiceError: If event is not found
            EventServiceError: If deletion fails
        """
        try:
            deleted = self.event_repository.delete(event_id)
        except EventNotFoundError as e:
            raise EventNotFoundServiceError(event_id) from e
        except SQLAlchemyError as e:
            log_database_operation(
                operation="DELETE",
                table="events",
                success=False,
                error=type(e).__name__,
                event_id=event_id,
            )
            logger.error(f"Database error deleting event {event_id}", exc_info=True)
            raise EventServiceError(
                "Failed to delete event", status_code=500, original_error=e
            ) from e

        log_database_operation(
            operation="DELETE", table="events", success=True, event_id=event_id
        )
        return deleted

    async def rsvp(self, event_id: int, user_id: int) -> RsvpResult:
        """Record a user's RSVP for an upcoming event.

        Args:
            event_id: Event to attend
            user_id: Attending user

        Returns:
            RSVP result with the new count

        Raises:
            EventNotFoundServiceError: If event is not found
            PastEventError: If the event date is before today
            AttendeeNotFoundError: If the user no longer exists
            DuplicateRsvpError: If the user already RSVPed
            EventServiceError: If the insert fails
        """
        event = await self.get_event_model(event_id)
        if event.event_date < date.today():
            raise PastEventError(event_id)

        try:
            user = await self.user_repository.get_by_id(user_id)
        except AccountRepositoryError as e:
            raise EventServiceError(
                "Failed to record RSVP", status_code=500, original_error=e
            ) from e
        if not user:
            raise AttendeeNotFoundError(user_id)

        try:
            rsvp_count = self.rsvp_repository.create(user_id, event_id)
        except RsvpAlreadyExistsError as e:
            raise DuplicateRsvpError(event_id) from e
        except SQLAlchemyError as e:
            log_database_operation(
                operation="INSERT",
                table="rsvps",
                success=False,
                error=type(e).__name__,
                event_id=event_id,
            )
            logger.error(f"Database error recording RSVP for event {event_id}", exc_info=True)
            raise EventServiceError(
                "Failed to record RSVP", status_code=500, original_error=e
            ) from e

        log_database_operation(
            operation="INSERT",
            table="rsvps",
            success=True,
            event_id=event_id,
            account_id=user_id,
        )
        return RsvpResult(event_id=event_id, rsvp_count=rsvp_count)

    async def ticket_payload(self, event_id: int, user_id: int | None = None) -> str:
        """Build the QR ticket contents for an event.

        The attendee is included when ``user_id`` names an existing user.

        Raises:
            EventNotFoundServiceError: If event is not found
        """
        event = await self.get_event_model(event_id)

        user = None
        if user_id is not None:
            try:
                user = await self.user_repository.get_by_id(user_id)
            except AccountRepositoryError as e:
                raise EventServiceError(
                    "Failed to build ticket", status_code=500, original_error=e
                ) from e
        return build_ticket_payload(event, user)

    async def ticket_png(self, event_id: int, user_id: int | None = None) -> bytes:
        """QR ticket as PNG bytes."""
        return render_qr_png(await self.ticket_payload(event_id, user_id))

    async def ticket_base64(self, event_id: int, user_id: int | None = None) -> str:
        """QR ticket as a base64 encoded PNG."""
        return render_qr_base64(await self.ticket_payload(event_id, user_id))
