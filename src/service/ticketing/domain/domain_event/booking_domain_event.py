"""
Booking Domain Events

Emitted after a booking or cancellation has committed. They only feed the
best-effort notification channel; nothing in the core reads them back.
"""

from typing import Any, Optional

import attrs
from uuid_utils import UUID

from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.enum.booking_status import BookingKind
from src.service.ticketing.domain.enum.notification_kind import NotificationKind


@attrs.define
class BookingConfirmedDomainEvent:
    """Domain event fired when a booking is confirmed"""

    booking_id: UUID
    event_id: UUID
    reference: str
    quantity: int
    kind: BookingKind
    user_id: Optional[str]
    attendee_email: Optional[str]
    attendee_name: Optional[str]

    @classmethod
    def from_booking(cls, *, booking: Booking) -> 'BookingConfirmedDomainEvent':
        return cls(
            booking_id=booking.id,
            event_id=booking.event_id,
            reference=booking.reference,
            quantity=booking.quantity,
            kind=booking.kind,
            user_id=booking.user_id,
            attendee_email=booking.attendee_email,
            attendee_name=booking.attendee_name,
        )

    @property
    def template_kind(self) -> NotificationKind:
        if self.kind == BookingKind.RSVP:
            return NotificationKind.RSVP_CONFIRMED
        return NotificationKind.BOOKING_CONFIRMED

    def to_payload(self) -> dict[str, Any]:
        return {
            'booking_id': str(self.booking_id),
            'event_id': str(self.event_id),
            'reference': self.reference,
            'quantity': self.quantity,
            'email': self.attendee_email,
            'name': self.attendee_name,
        }


@attrs.define
class BookingCancelledDomainEvent:
    booking_id: UUID
    event_id: UUID
    reference: str
    quantity: int
    user_id: Optional[str]
    attendee_email: Optional[str]

    @classmethod
    def from_booking(cls, *, booking: Booking) -> 'BookingCancelledDomainEvent':
        return cls(
            booking_id=booking.id,
            event_id=booking.event_id,
            reference=booking.reference,
            quantity=booking.quantity,
            user_id=booking.user_id,
            attendee_email=booking.attendee_email,
        )

    @property
    def template_kind(self) -> NotificationKind:
        return NotificationKind.BOOKING_CANCELLED

    def to_payload(self) -> dict[str, Any]:
        return {
            'booking_id': str(self.booking_id),
            'event_id': str(self.event_id),
            'reference': self.reference,
            'quantity': self.quantity,
            'email': self.attendee_email,
        }
