from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.app.service.inventory_ledger import InventoryLedger
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus


class PublishEventUseCase:
    def __init__(self, *, inventory_store: IInventoryStore, ledger: InventoryLedger) -> None:
        self.inventory_store = inventory_store
        self.ledger = ledger

    @classmethod
    @inject
    def depends(
        cls,
        inventory_store: IInventoryStore = Depends(Provide[Container.inventory_store]),
        ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ) -> Self:
        return cls(inventory_store=inventory_store, ledger=ledger)

    @Logger.io
    async def publish(self, *, event_id: UUID, actor_id: str) -> Event:
        event = await self.inventory_store.get_event(event_id=event_id)
        if not event:
            raise NotFoundError('Event not found')
        if event.organizer_id != actor_id:
            raise ForbiddenError('Only the organizer can publish this event')

        return await self.ledger.transition_lifecycle(
            event_id=event_id, from_status=EventStatus.DRAFT, to_status=EventStatus.ACTIVE
        )
