from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.event_entity import Event


class CreateEventUseCase:
    """
    Create an event with a fresh ledger: sold = 0, available = total.

    publish=True (organizer flow) opens the event for bookings immediately,
    otherwise it stays a draft until PublishEventUseCase runs.
    """

    def __init__(self, *, inventory_store: IInventoryStore) -> None:
        self.inventory_store = inventory_store
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        inventory_store: IInventoryStore = Depends(Provide[Container.inventory_store]),
    ) -> Self:
        return cls(inventory_store=inventory_store)

    @Logger.io
    async def create_event(
        self,
        *,
        organizer_id: str,
        name: str,
        starts_at: datetime,
        total_tickets: int,
        description: str = '',
        location: str = '',
        ends_at: Optional[datetime] = None,
        publish: bool = True,
    ) -> Event:
        with self.tracer.start_as_current_span(
            'use_case.create_event',
            attributes={'organizer.id': organizer_id, 'event.total_tickets': total_tickets},
        ):
            event = Event.create(
                organizer_id=organizer_id,
                name=name,
                description=description,
                location=location,
                starts_at=starts_at,
                ends_at=ends_at,
                total_tickets=total_tickets,
                publish=publish,
            )
            created = await self.inventory_store.create_event(event=event)
            Logger.base.info(
                f'🎪 [CREATE-EVENT] {created.id} "{created.name}" '
                f'capacity={created.total_tickets} status={created.status.value}'
            )
            return created
