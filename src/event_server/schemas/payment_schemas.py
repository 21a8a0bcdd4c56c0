"""Payment schemas.

No payment gateway is involved: a payment request confirms attendance and
triggers the ticket email.
"""

from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field


class PaymentRequest(BaseModel):
    """Schema for payment requests."""

    event_id: int = Field(..., gt=0, description="Event being paid for", examples=[42])
    amount: Decimal | None = Field(
        default=None,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Amount paid; must equal the event price when given",
        examples=[15.0],
    )
    email: EmailStr | None = Field(
        default=None,
        description="Where to send the ticket (defaults to the account email)",
        examples=["alice@example.com"],
    )


class PaymentResponse(BaseModel):
    """Response for a processed payment."""

    message: str = Field(default="Payment processed successfully")
    event_id: int = Field(..., gt=0)
    email: str = Field(..., description="Address the ticket was sent to")
    email_sent: bool = Field(..., description="Whether the confirmation email was handed to the mail relay")
