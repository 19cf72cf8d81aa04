from datetime import datetime, timezone
from typing import Dict, List, Optional

import anyio
import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import (
    DuplicateRegistrationError,
    ReferenceCollisionError,
)
from src.service.ticketing.app.interface.i_booking_store import IBookingStore
from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.enum.booking_status import BookingStatus


class InMemoryBookingStoreImpl(IBookingStore):
    """Enforces the same uniqueness rules as the booking table's unique indexes."""

    def __init__(self) -> None:
        self._bookings: Dict[UUID, Booking] = {}
        self._by_reference: Dict[str, UUID] = {}

    def _confirmed_anonymous(self, event_id: UUID, email: str) -> Optional[Booking]:
        for booking in self._bookings.values():
            if (
                booking.event_id == event_id
                and booking.is_anonymous
                and booking.attendee_email == email
                and booking.status == BookingStatus.CONFIRMED
            ):
                return booking
        return None

    async def create(self, *, booking: Booking) -> Booking:
        await anyio.sleep(0)
        if booking.reference in self._by_reference:
            raise ReferenceCollisionError(f'Reference {booking.reference} already exists')
        if booking.is_anonymous and booking.attendee_email:
            if self._confirmed_anonymous(booking.event_id, booking.attendee_email):
                raise DuplicateRegistrationError()
        self._bookings[booking.id] = attrs.evolve(booking)
        self._by_reference[booking.reference] = booking.id
        return attrs.evolve(booking)

    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        await anyio.sleep(0)
        booking = self._bookings.get(booking_id)
        return attrs.evolve(booking) if booking else None

    async def get_by_reference(self, *, reference: str) -> Optional[Booking]:
        await anyio.sleep(0)
        booking_id = self._by_reference.get(reference)
        return attrs.evolve(self._bookings[booking_id]) if booking_id else None

    async def find_confirmed_by_email(self, *, event_id: UUID, email: str) -> Optional[Booking]:
        await anyio.sleep(0)
        booking = self._confirmed_anonymous(event_id, email.strip().lower())
        return attrs.evolve(booking) if booking else None

    async def mark_cancelled(self, *, booking_id: UUID) -> Optional[Booking]:
        await anyio.sleep(0)
        current = self._bookings.get(booking_id)
        if current is None or current.status != BookingStatus.CONFIRMED:
            return None
        now = datetime.now(timezone.utc)
        updated = attrs.evolve(
            current, status=BookingStatus.CANCELLED, cancelled_at=now, updated_at=now
        )
        self._bookings[booking_id] = updated
        return attrs.evolve(updated)

    async def list_by_event(
        self, *, event_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        await anyio.sleep(0)
        bookings = [
            attrs.evolve(b)
            for b in self._bookings.values()
            if b.event_id == event_id and (status is None or b.status == status)
        ]
        return sorted(bookings, key=lambda b: (b.created_at, str(b.id)))

    async def list_by_user(
        self, *, user_id: str, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        await anyio.sleep(0)
        bookings = [
            attrs.evolve(b)
            for b in self._bookings.values()
            if b.user_id == user_id and (status is None or b.status == status)
        ]
        return sorted(bookings, key=lambda b: (b.created_at, str(b.id)), reverse=True)
