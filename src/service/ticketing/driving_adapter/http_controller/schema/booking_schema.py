from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.platform.types import UtilsUUID7
from src.service.ticketing.domain.entity.booking_entity import Booking


class BookingCreateRequest(BaseModel):
    event_id: UtilsUUID7
    quantity: int = Field(default=1, ge=1)
    # Attendee details; email is required when booking without X-User-Id
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        json_schema_extra = {
            'example': {
                'event_id': '019a3fa5-7c1e-7b3a-9f55-3c2f5f0e8a11',
                'quantity': 2,
            }
        }


class RsvpCreateRequest(BaseModel):
    event_id: UtilsUUID7
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: Optional[str] = None
    quantity: int = Field(default=1, ge=1)

    class Config:
        json_schema_extra = {
            'example': {
                'event_id': '019a3fa5-7c1e-7b3a-9f55-3c2f5f0e8a11',
                'name': 'Ada Lovelace',
                'email': 'ada@example.com',
            }
        }


class BookingResponse(BaseModel):
    id: UtilsUUID7
    reference: str
    event_id: UtilsUUID7
    quantity: int
    kind: str
    status: str
    source: str
    user_id: Optional[str]
    attendee_name: Optional[str]
    attendee_email: Optional[str]
    created_at: Optional[datetime]
    cancelled_at: Optional[datetime]

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            reference=booking.reference,
            event_id=booking.event_id,
            quantity=booking.quantity,
            kind=booking.kind.value,
            status=booking.status.value,
            source=booking.source,
            user_id=booking.user_id,
            attendee_name=booking.attendee_name,
            attendee_email=booking.attendee_email,
            created_at=booking.created_at,
            cancelled_at=booking.cancelled_at,
        )
