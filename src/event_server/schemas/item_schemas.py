"""Item schemas for API responses.

Items carry an arbitrary JSON document, so there is no request schema: the
router accepts any JSON body and stores it as-is.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ItemResponse(BaseModel):
    """Schema for item API responses.

    This schema is used when returning item information through the API.
    It includes the item ID, the stored document, and timestamps.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., gt=0, description="Item ID", examples=[123])
    data: Any = Field(
        default=None,
        description="Stored JSON document",
        examples=[{"name": "chair", "legs": 4}],
    )
    created_at: datetime = Field(
        ..., description="Item creation timestamp", examples=["2024-01-01T00:00:00Z"]
    )
    updated_at: datetime | None = Field(
        default=None,
        description="Last update timestamp",
        examples=["2024-01-02T12:00:00Z"],
    )
