"""Payment service.

There is no payment gateway: a payment is accepted when the amount (if
given) matches the event price, and the attendee is mailed a QR ticket.
"""

from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from ..config import Settings
from ..logging_config import get_logger
from ..repositories.event_repository import EventNotFoundError, EventRepository
from ..repositories.user_repository import AccountRepositoryError, UserRepository
from ..schemas.payment_schemas import PaymentRequest, PaymentResponse
from .mail_service import Mailer, MailDeliveryError, build_payment_confirmation
from .ticket_service import build_ticket_payload, render_qr_png

logger = get_logger("payment_service")


class PaymentServiceError(Exception):
    """Base exception for payment service errors."""

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


class AmountMismatchError(PaymentServiceError):
    """Raised when the paid amount differs from the event price."""

    def __init__(self, amount: Decimal, price: Decimal) -> None:
        super().__init__(
            f"Payment amount {amount} does not match the event price {price}",
            status_code=400,
        )


class PaymentService:
    """Service for processing payments and mailing tickets."""

    def __init__(self, session: Session, mailer: Mailer, settings: Settings) -> None:
        """Initialize payment service.

        Args:
            session: SQLModel database session
            mailer: Outgoing mail transport
            settings: Application settings (sender address)
        """
        self.session = session
        self.mailer = mailer
        self.settings = settings
        self.event_repository = EventRepository(session)
        self.user_repository = UserRepository(session)

    async def process_payment(self, request: PaymentRequest, user_id: int) -> PaymentResponse:
        """Accept a payment and email the ticket.

        Args:
            request: Payment request
            user_id: Paying user

        Returns:
            Payment response naming the address the ticket went to

        Raises:
            PaymentServiceError: 404 for unknown events or users, 400 for a
                wrong amount, 503 when the email cannot be delivered
        """
        try:
            event = self.event_repository.get_by_id_or_raise(request.event_id)
            user = await self.user_repository.get_by_id(user_id)
        except EventNotFoundError as e:
            raise PaymentServiceError(
                f"Event with id {request.event_id} not found", status_code=404
            ) from e
        except (SQLAlchemyError, AccountRepositoryError) as e:
            logger.error("Database error during payment", exc_info=True)
            raise PaymentServiceError(
                "Failed to process payment", status_code=500, original_error=e
            ) from e

        if not user:
            raise PaymentServiceError(f"User with id {user_id} not found", status_code=404)

        price = Decimal(str(event.price))
        if request.amount is not None and request.amount != price:
            raise AmountMismatchError(request.amount, price)

        recipient = str(request.email) if request.email else user.email
        ticket_png = render_qr_png(build_ticket_payload(event, user))
        message = build_payment_confirmation(
            event=event,
            recipient=recipient,
            ticket_png=ticket_png,
            sender_address=self.settings.mail_from_address,
            sender_name=self.settings.mail_from_name,
        )

        try:
            await run_in_threadpool(self.mailer.send, message)
        except MailDeliveryError as e:
            logger.error(
                f"Ticket email for event {event.id} could not be delivered",
                exc_info=True,
                extra={"event_id": event.id, "account_id": user_id},
            )
            raise PaymentServiceError(
                "Email service is temporarily unavailable",
                status_code=503,
                original_error=e,
            ) from e

        logger.info(
            f"Payment processed for event {event.id}",
            extra={"event_id": event.id, "account_id": user_id, "amount": str(price)},
        )
        return PaymentResponse(event_id=event.id, email=recipient, email_sent=True)
