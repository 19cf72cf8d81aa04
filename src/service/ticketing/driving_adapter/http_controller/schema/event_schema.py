from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.platform.types import UtilsUUID7
from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.entity.event_entity import Event


class EventCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    starts_at: datetime
    total_tickets: int = Field(ge=0)
    description: str = ''
    location: str = ''
    ends_at: Optional[datetime] = None
    publish: bool = True

    class Config:
        json_schema_extra = {
            'example': {
                'name': 'Community Meetup',
                'starts_at': '2026-11-20T18:00:00Z',
                'ends_at': '2026-11-20T20:00:00Z',
                'total_tickets': 100,
                'description': 'Monthly meetup',
                'location': 'Main Hall',
                'publish': True,
            }
        }


class EventUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    total_tickets: Optional[int] = Field(default=None, ge=0)


class EventResponse(BaseModel):
    id: UtilsUUID7
    organizer_id: str
    name: str
    description: str
    location: str
    starts_at: datetime
    ends_at: Optional[datetime]
    total_tickets: int
    sold_tickets: int
    available_tickets: int
    status: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, event: Event) -> 'EventResponse':
        return cls(
            id=event.id,
            organizer_id=event.organizer_id,
            name=event.name,
            description=event.description,
            location=event.location,
            starts_at=event.starts_at,
            ends_at=event.ends_at,
            total_tickets=event.total_tickets,
            sold_tickets=event.sold_tickets,
            available_tickets=event.available_tickets,
            status=event.status.value,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


class AttendeeResponse(BaseModel):
    booking_id: UtilsUUID7
    reference: str
    user_id: Optional[str]
    name: Optional[str]
    email: Optional[str]
    quantity: int
    kind: str
    status: str
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, booking: Booking) -> 'AttendeeResponse':
        return cls(
            booking_id=booking.id,
            reference=booking.reference,
            user_id=booking.user_id,
            name=booking.attendee_name,
            email=booking.attendee_email,
            quantity=booking.quantity,
            kind=booking.kind.value,
            status=booking.status.value,
            created_at=booking.created_at,
        )
