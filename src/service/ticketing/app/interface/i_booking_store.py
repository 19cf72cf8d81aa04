"""
Booking Store Interface

Booking rows are written once and only ever flip confirmed -> cancelled.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.enum.booking_status import BookingStatus


class IBookingStore(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        """
        Persist a new confirmed booking.

        Raises:
            ReferenceCollisionError: reference already taken (caller regenerates)
            DuplicateRegistrationError: a confirmed anonymous booking exists for (event, email)
        """
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_by_reference(self, *, reference: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def find_confirmed_by_email(self, *, event_id: UUID, email: str) -> Optional[Booking]:
        """Confirmed anonymous booking for (event, email), if any."""
        pass

    @abstractmethod
    async def mark_cancelled(self, *, booking_id: UUID) -> Optional[Booking]:
        """
        Conditional confirmed -> cancelled flip.

        Returns:
            The cancelled booking, or None when it was not confirmed (or missing)
        """
        pass

    @abstractmethod
    async def list_by_event(
        self, *, event_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        """Bookings of an event, oldest first."""
        pass

    @abstractmethod
    async def list_by_user(
        self, *, user_id: str, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        """Bookings of an account, newest first."""
        pass
