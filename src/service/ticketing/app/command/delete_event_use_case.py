from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore


class DeleteEventUseCase:
    """Hard delete of the live row. Archive records keep their snapshot."""

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
    async def delete(self, *, event_id: UUID, actor_id: str) -> None:
        event = await self.inventory_store.get_event(event_id=event_id)
        if not event:
            raise NotFoundError('Event not found')
        if event.organizer_id != actor_id:
            raise ForbiddenError('Only the organizer can delete this event')

        if not await self.inventory_store.delete_event(event_id=event_id):
            raise NotFoundError('Event not found')
        Logger.base.info(f'🗑️ [DELETE-EVENT] {event_id} deleted by {actor_id}')
