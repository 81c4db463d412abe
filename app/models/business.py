"""
Business records surveyed by the discount caller.

A business is created by CSV ingestion and afterwards only mutated by the
call-handling path.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class CallStatus(str, Enum):
    """Lifecycle of the outbound survey call for a business."""

    PENDING = "pending"
    CALLING = "calling"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class BusinessCreate(BaseModel):
    """A validated CSV row ready for insertion."""

    name: str = Field(min_length=2)
    phone: str
    has_discount: bool = False

    def to_row(self) -> dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "has_discount": self.has_discount,
            "call_status": CallStatus.PENDING.value,
        }


class Business(BaseModel):
    """A row of the businesses table."""

    id: str
    name: str
    phone: str

    # Discount data (populated when a call completes)
    has_discount: bool = False
    discount_amount: str | None = None
    discount_details: str | None = None
    availability_info: str | None = None
    eligibility_info: str | None = None

    call_status: CallStatus = CallStatus.PENDING
    last_called: datetime | None = None
