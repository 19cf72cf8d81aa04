from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus


class ListEventsUseCase:
    def __init__(self, *, inventory_store: IInventoryStore) -> None:
        self.inventory_store = inventory_store

    @classmethod
    @inject
    def depends(
        cls,
        inventory_store: IInventoryStore = Depends(Provide[Container.inventory_store]),
    ) -> Self:
        return cls(inventory_store=inventory_store)

    @Logger.io
    async def list_events(
        self, *, status: Optional[EventStatus] = None, organizer_id: Optional[str] = None
    ) -> List[Event]:
        return await self.inventory_store.list_events(status=status, organizer_id=organizer_id)

    @Logger.io
    async def list_available(self) -> List[Event]:
        """Events currently accepting bookings."""
        return await self.inventory_store.list_events(status=EventStatus.ACTIVE)
