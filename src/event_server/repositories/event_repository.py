"""Event repository for database operations.

This module provides the EventRepository class that handles all database
operations for events, including creation, listing, lookup and deletion.
"""

from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, desc, select

from ..models.event import Event, EventCreate
from ..models.rsvp import Rsvp


class EventNotFoundError(Exception):
    """Raised when an event is not found."""

    def __init__(self, event_id: int) -> None:
        self.event_id = event_id
        super().__init__(f"Event with id {event_id} not found")


class EventRepository:
    """Repository for event database operations."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def create(self, event_data: EventCreate, poster_url: str) -> Event:
        """Create a new event.

        Args:
            event_data: Validated event fields
            poster_url: Public URL of the already uploaded poster

        Returns:
            Event: The created event

        Raises:
            SQLAlchemyError: If database operation fails
        """
        try:
            db_event = Event(
                title=event_data.title,
                description=event_data.description,
                event_date=event_data.event_date,
                location=event_data.location,
                price=event_data.price,
                poster_url=poster_url,
            )

            self.session.add(db_event)
            self.session.commit()
            self.session.refresh(db_event)

            return db_event

        except SQLAlchemyError as e:
            self.session.rollback()
            raise SQLAlchemyError(
                f"Database error while creating event: {str(e)}"
            ) from e

    def get_by_id(self, event_id: int) -> Event | None:
        """Get an event by ID.

        Args:
            event_id: ID of the event to retrieve

        Returns:
            Event: The event if found, None otherwise
        """
        try:
            statement = select(Event).where(Event.id == event_id)
            result = self.session.exec(statement)
            return result.first()

        except SQLAlchemyError as e:
            raise SQLAlchemyError(
                f"Database error while retrieving event {event_id}: {str(e)}"
            ) from e

    def get_by_id_or_raise(self, event_id: int) -> Event:
        """Get an event by ID or raise an exception.

        Raises:
            EventNotFoundError: If event is not found
        """
        event = self.get_by_id(event_id)
        if not event:
            raise EventNotFoundError(event_id)
        return event

    def get_all(self) -> list[Event]:
        """Get all events, most recently created first.

        Events created in the same instant are ordered by descending id.
        """
        try:
            statement = select(Event).order_by(desc(Event.created_at), desc(Event.id))
            result = self.session.exec(statement)
            return list(result.all())

        except SQLAlchemyError as e:
            raise SQLAlchemyError(
                f"Database error while retrieving events: {str(e)}"
            ) from e

    def delete(self, event_id: int) -> bool:
        """Delete an event together with its RSVPs.

        Both deletes are committed in a single transaction.

        Args:
            event_id: ID of the event to delete

        Returns:
            bool: True if event was deleted

        Raises:
            EventNotFoundError: If event is not found
            SQLAlchemyError: If database operation fails
        """
        try:
            db_event = self.get_by_id_or_raise(event_id)

            self.session.execute(sql_delete(Rsvp).where(Rsvp.event_id == event_id))
            self.session.delete(db_event)
            self.session.commit()

            return True

        except EventNotFoundError:
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            raise SQLAlchemyError(
                f"Database error while deleting event {event_id}: {str(e)}"
            ) from e
