"""RSVP repository for database operations.

Recording an RSVP touches two tables: the ``rsvps`` association row and the
``events.rsvp_count`` counter. Both writes share one transaction.
"""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, and_, desc, select

from ..models.event import Event
from ..models.rsvp import Rsvp


class RsvpAlreadyExistsError(Exception):
    """Raised when a user RSVPs to the same event twice."""

    def __init__(self, user_id: int, event_id: int) -> None:
        self.user_id = user_id
        self.event_id = event_id
        super().__init__(f"User {user_id} already RSVPed to event {event_id}")


class RsvpRepository:
    """Repository for RSVP database operations."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def exists(self, user_id: int, event_id: int) -> bool:
        """Check whether the user already RSVPed to the event."""
        try:
            statement = select(Rsvp.id).where(
                and_(Rsvp.user_id == user_id, Rsvp.event_id == event_id)
            )
            return self.session.exec(statement).first() is not None

        except SQLAlchemyError as e:
            raise SQLAlchemyError(
                f"Database error while checking RSVP for event {event_id}: {str(e)}"
            ) from e

    def create(self, user_id: int, event_id: int) -> int:
        """Record an RSVP and bump the event's counter.

        The counter is incremented in SQL (``rsvp_count = rsvp_count + 1``)
        so concurrent RSVPs never overwrite each other.

        Args:
            user_id: ID of the attending user
            event_id: ID of the event

        Returns:
            int: The event's RSVP count after the increment

        Raises:
            RsvpAlreadyExistsError: If the user already RSVPed to the event
            SQLAlchemyError: If database operation fails
        """
        if self.exists(user_id, event_id):
            raise RsvpAlreadyExistsError(user_id, event_id)

        try:
            self.session.add(Rsvp(user_id=user_id, event_id=event_id))
            self.session.flush()

            self.session.execute(
                update(Event)
                .where(Event.id == event_id)
                .values(rsvp_count=Event.rsvp_count + 1)
            )
            self.session.commit()

        except IntegrityError as e:
            self.session.rollback()
            if self.exists(user_id, event_id):
                raise RsvpAlreadyExistsError(user_id, event_id) from e
            raise SQLAlchemyError(
                f"Integrity error while recording RSVP for event {event_id}: {str(e)}"
            ) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise SQLAlchemyError(
                f"Database error while recording RSVP for event {event_id}: {str(e)}"
            ) from e

        statement = select(Event.rsvp_count).where(Event.id == event_id)
        return self.session.exec(statement).one()

    def list_for_user(self, user_id: int) -> list[tuple[Rsvp, Event]]:
        """Get a user's RSVPs joined with their events, newest first.

        Args:
            user_id: ID of the user

        Returns:
            List of ``(rsvp, event)`` pairs
        """
        try:
            statement = (
                select(Rsvp, Event)
                .join(Event, Rsvp.event_id == Event.id)
                .where(Rsvp.user_id == user_id)
                .order_by(desc(Rsvp.created_at), desc(Rsvp.id))
            )
            return list(self.session.exec(statement).all())

        except SQLAlchemyError as e:
            raise SQLAlchemyError(
                f"Database error while retrieving RSVPs for user {user_id}: {str(e)}"
            ) from e
