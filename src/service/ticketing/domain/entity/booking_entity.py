from datetime import datetime, timezone
from typing import Optional

import attrs
from uuid_utils import UUID, uuid7

from src.platform.exception.exceptions import (
    DomainError,
    ForbiddenError,
    InvalidTransitionError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.enum.booking_status import BookingKind, BookingStatus
from src.service.ticketing.domain.value_object.attendee_info import AttendeeInfo
from src.service.ticketing.domain.value_object.booking_reference import (
    generate_booking_reference,
)


@attrs.define
class Booking:
    event_id: UUID
    reference: str
    quantity: int
    kind: BookingKind
    user_id: Optional[str] = None
    attendee_email: Optional[str] = None
    attendee_name: Optional[str] = None
    attendee_phone: Optional[str] = None
    source: str = 'app'
    status: BookingStatus = BookingStatus.CONFIRMED
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: UUID,
        attendee: AttendeeInfo,
        quantity: int,
        kind: BookingKind,
        reference_prefix: str,
        source: str = 'app',
    ) -> 'Booking':
        if quantity < 1:
            raise DomainError('quantity must be at least 1')
        if attendee.is_anonymous:
            if not attendee.email:
                raise DomainError('email is required to register without an account')
            if '@' not in attendee.email:
                raise DomainError('email is not a valid address')

        now = datetime.now(timezone.utc)
        return cls(
            event_id=event_id,
            reference=generate_booking_reference(reference_prefix),
            quantity=quantity,
            kind=kind,
            user_id=attendee.user_id,
            attendee_email=attendee.email,
            attendee_name=attendee.name,
            attendee_phone=attendee.phone,
            source=source,
            status=BookingStatus.CONFIRMED,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    @property
    def reference_prefix(self) -> str:
        return self.reference.split('-', 1)[0]

    def check_holder(self, requester_id: Optional[str], *, action: str) -> None:
        """
        Account-held bookings are only visible to and cancellable by their holder.
        Anonymous RSVPs carry no holder and pass.

        Raises:
            UnauthorizedError: no requester identity for an account-held booking
            ForbiddenError: the requester is not the holder
        """
        if self.user_id is None:
            return
        if requester_id is None:
            raise UnauthorizedError(f'Sign in to {action} this booking')
        if requester_id != self.user_id:
            raise ForbiddenError(f'Only the booking holder can {action} this booking')

    def with_new_reference(self) -> 'Booking':
        return attrs.evolve(self, reference=generate_booking_reference(self.reference_prefix))

    @Logger.io
    def cancel(self) -> 'Booking':
        """
        Cancel booking (Domain validation)

        Raises:
            InvalidTransitionError: When the booking is already cancelled (terminal state)
        """
        if self.status == BookingStatus.CANCELLED:
            raise InvalidTransitionError('Booking already cancelled')

        now = datetime.now(timezone.utc)
        return attrs.evolve(self, status=BookingStatus.CANCELLED, cancelled_at=now, updated_at=now)
