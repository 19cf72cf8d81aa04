from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.event_entity import Event


class GetEventUseCase:
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
    async def get_by_id(self, *, event_id: UUID) -> Event:
        event = await self.inventory_store.get_event(event_id=event_id)
        if not event:
            raise NotFoundError('Event not found')
        return event
