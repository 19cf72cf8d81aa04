from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_booking_store import IBookingStore
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.enum.booking_status import BookingStatus


class GetAttendeesForEventUseCase:
    """Attendee list for the organizer: confirmed bookings, oldest first."""

    def __init__(self, *, inventory_store: IInventoryStore, booking_store: IBookingStore) -> None:
        self.inventory_store = inventory_store
        self.booking_store = booking_store

    @classmethod
    @inject
    def depends(
        cls,
        inventory_store: IInventoryStore = Depends(Provide[Container.inventory_store]),
        booking_store: IBookingStore = Depends(Provide[Container.booking_store]),
    ) -> Self:
        return cls(inventory_store=inventory_store, booking_store=booking_store)

    @Logger.io
    async def get_attendees(
        self,
        *,
        event_id: UUID,
        requester_id: Optional[str] = None,
        include_cancelled: bool = False,
    ) -> List[Booking]:
        event = await self.inventory_store.get_event(event_id=event_id)
        if not event:
            raise NotFoundError('Event not found')
        if requester_id is not None and event.organizer_id != requester_id:
            raise ForbiddenError('Only the organizer can view the attendee list')

        status = None if include_cancelled else BookingStatus.CONFIRMED
        return await self.booking_store.list_by_event(event_id=event_id, status=status)
