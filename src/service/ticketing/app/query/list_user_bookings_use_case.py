from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_booking_store import IBookingStore
from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.enum.booking_status import BookingStatus


class ListUserBookingsUseCase:
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
    async def list_user_bookings(
        self, *, user_id: str, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        return await self.booking_store.list_by_user(user_id=user_id, status=status)
