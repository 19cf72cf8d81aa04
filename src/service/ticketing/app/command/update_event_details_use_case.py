from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.event_entity import Event, ensure_utc


class UpdateEventDetailsUseCase:
    """
    Organizer edits of the descriptive fields.

    Counters are never written here. Capacity can only be resized while nothing is
    sold, and that check is part of the conditional update itself.
    """

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
    async def update_details(
        self,
        *,
        event_id: UUID,
        actor_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
        starts_at: Optional[datetime] = None,
        ends_at: Optional[datetime] = None,
        total_tickets: Optional[int] = None,
    ) -> Event:
        event = await self.inventory_store.get_event(event_id=event_id)
        if not event:
            raise NotFoundError('Event not found')
        if event.organizer_id != actor_id:
            raise ForbiddenError('Only the organizer can update this event')

        new_start = ensure_utc(starts_at) if starts_at else event.starts_at
        new_end = ensure_utc(ends_at) if ends_at else event.ends_at
        if new_end is not None and new_end < new_start:
            raise DomainError('Event cannot end before it starts')

        if total_tickets is not None and total_tickets != event.total_tickets:
            if total_tickets < 0:
                raise DomainError('total_tickets must be zero or greater')
            resized = await self.inventory_store.resize_capacity_if_unsold(
                event_id=event_id, total_tickets=total_tickets
            )
            if resized is None:
                raise ConflictError('Capacity cannot change once tickets have been sold')
            Logger.base.info(f'📐 [UPDATE-EVENT] {event_id} capacity -> {total_tickets}')

        updated = await self.inventory_store.update_details(
            event_id=event_id,
            name=name,
            description=description,
            location=location,
            starts_at=starts_at,
            ends_at=ends_at,
        )
        if updated is None:
            raise NotFoundError('Event not found')
        return updated
