from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_booking_store import IBookingStore
from src.service.ticketing.domain.entity.booking_entity import Booking


class GetBookingUseCase:
    def __init__(self, *, booking_store: IBookingStore) -> None:
        self.booking_store = booking_store

    @classmethod
    @inject
    def depends(
        cls,
        booking_store: IBookingStore = Depends(Provide[Container.booking_store]),
    ) -> Self:
        return cls(booking_store=booking_store)

    @Logger.io
    async def get_booking(
        self, *, booking_id: UUID, requester_id: Optional[str] = None
    ) -> Booking:
        booking = await self.booking_store.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        booking.check_holder(requester_id, action='view')
        return booking

    @Logger.io
    async def get_by_reference(self, *, reference: str) -> Booking:
        booking = await self.booking_store.get_by_reference(reference=reference)
        if not booking:
            raise NotFoundError('Booking not found')
        return booking
