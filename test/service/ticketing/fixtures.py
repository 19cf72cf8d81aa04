"""Shared builders for ticketing tests."""

from datetime import datetime
from typing import Optional
from unittest.mock import MagicMock

from src.service.ticketing.app.command.archive_event_use_case import ArchiveEventUseCase
from src.service.ticketing.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.ticketing.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.ticketing.app.command.restore_event_use_case import RestoreEventUseCase
from src.service.ticketing.app.service.inventory_ledger import InventoryLedger
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_archive_store_impl import (
    InMemoryArchiveStoreImpl,
)
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_booking_store_impl import (
    InMemoryBookingStoreImpl,
)
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_inventory_store_impl import (
    InMemoryInventoryStoreImpl,
)
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_reconciliation_store_impl import (
    InMemoryReconciliationStoreImpl,
)
from test.util_constant import EVENT_CAPACITY, EVENT_ENDS_AT, EVENT_NAME, EVENT_STARTS_AT, ORGANIZER_ID


def build_event(
    *,
    total_tickets: int = EVENT_CAPACITY,
    status: EventStatus = EventStatus.ACTIVE,
    organizer_id: str = ORGANIZER_ID,
    name: str = EVENT_NAME,
    starts_at: datetime = EVENT_STARTS_AT,
    ends_at: Optional[datetime] = EVENT_ENDS_AT,
) -> Event:
    event = Event.create(
        organizer_id=organizer_id,
        name=name,
        starts_at=starts_at,
        ends_at=ends_at,
        total_tickets=total_tickets,
    )
    event.status = status
    return event


class InMemoryWorld:
    """In-memory stores plus the use cases wired over them, like the container does."""

    def __init__(self, *, max_attempts: int = 3) -> None:
        self.inventory_store = InMemoryInventoryStoreImpl()
        self.booking_store = InMemoryBookingStoreImpl()
        self.archive_store = InMemoryArchiveStoreImpl()
        self.reconciliation_store = InMemoryReconciliationStoreImpl()
        self.dispatcher = MagicMock()
        self.ledger = InventoryLedger(
            inventory_store=self.inventory_store,
            max_attempts=max_attempts,
            retry_wait_min=0,
            retry_wait_max=0,
        )

    async def add_event(self, **kwargs) -> Event:
        return await self.inventory_store.create_event(event=build_event(**kwargs))

    def create_booking(self) -> CreateBookingUseCase:
        return CreateBookingUseCase(
            booking_store=self.booking_store,
            ledger=self.ledger,
            reconciliation_store=self.reconciliation_store,
            notification_dispatcher=self.dispatcher,
        )

    def cancel_booking(self) -> CancelBookingUseCase:
        return CancelBookingUseCase(
            booking_store=self.booking_store,
            ledger=self.ledger,
            reconciliation_store=self.reconciliation_store,
            notification_dispatcher=self.dispatcher,
        )

    def archive_event(self, **kwargs) -> ArchiveEventUseCase:
        return ArchiveEventUseCase(
            inventory_store=self.inventory_store,
            archive_store=self.archive_store,
            ledger=self.ledger,
            notification_dispatcher=self.dispatcher,
            **kwargs,
        )

    def restore_event(self) -> RestoreEventUseCase:
        return RestoreEventUseCase(
            inventory_store=self.inventory_store,
            archive_store=self.archive_store,
            ledger=self.ledger,
            notification_dispatcher=self.dispatcher,
        )
