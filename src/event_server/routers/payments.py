"""Payments router."""

from fastapi import APIRouter

from ..dependencies import CurrentUser, PaymentServiceDep
from ..schemas.payment_schemas import PaymentRequest, PaymentResponse

router = APIRouter(
    prefix="/api",
    tags=["payments"],
    responses={
        400: {"description": "Amount does not match the event price"},
        401: {"description": "Not authenticated"},
        403: {"description": "Not a user token"},
        404: {"description": "Event not found"},
        503: {"description": "Email service unavailable"},
    },
)


@router.post(
    "/pay",
    response_model=PaymentResponse,
    summary="Pay for an event",
    description=(
        "Confirm payment for an event and email the QR ticket to the given "
        "address or the account's registered email"
    ),
)
async def pay(
    request: PaymentRequest,
    current_user: CurrentUser,
    payment_service: PaymentServiceDep,
) -> PaymentResponse:
    """Process a payment.

    Example:
        POST /api/pay
        {"event_id": 42, "amount": 15.0}

        Response (200):
        {"message": "Payment processed successfully", "event_id": 42,
         "email": "alice@example.com", "email_sent": true}
    """
    return await payment_service.process_payment(request, current_user.account_id)
