"""
In-memory Inventory Store

Backs STORAGE_BACKEND=memory (local runs, tests). Each conditional write reads and
swaps the row with no await in between, so on a single event loop it commits as one
step, the same contract the PostgreSQL store gets from UPDATE ... WHERE ... RETURNING.
The leading `anyio.sleep(0)` stands in for the network round trip and lets
concurrent callers interleave before the write.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

import anyio
import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import ConflictError
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus


class InMemoryInventoryStoreImpl(IInventoryStore):
    def __init__(self) -> None:
        self._events: Dict[UUID, Event] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    async def create_event(self, *, event: Event) -> Event:
        await anyio.sleep(0)
        if event.id in self._events:
            raise ConflictError(f'Event {event.id} already exists')
        now = self._now()
        stored = attrs.evolve(
            event, created_at=event.created_at or now, updated_at=event.updated_at or now
        )
        self._events[stored.id] = stored
        return attrs.evolve(stored)

    async def get_event(self, *, event_id: UUID) -> Optional[Event]:
        await anyio.sleep(0)
        event = self._events.get(event_id)
        return attrs.evolve(event) if event else None

    async def list_events(
        self,
        *,
        status: Optional[EventStatus] = None,
        organizer_id: Optional[str] = None,
    ) -> List[Event]:
        await anyio.sleep(0)
        events = [
            attrs.evolve(e)
            for e in self._events.values()
            if (status is None or e.status == status)
            and (organizer_id is None or e.organizer_id == organizer_id)
        ]
        return sorted(events, key=lambda e: e.starts_at)

    async def count_by_status(
        self, *, organizer_id: Optional[str] = None
    ) -> dict[EventStatus, int]:
        await anyio.sleep(0)
        counts = {status: 0 for status in EventStatus}
        for event in self._events.values():
            if organizer_id is None or event.organizer_id == organizer_id:
                counts[event.status] += 1
        return counts

    async def update_details(
        self,
        *,
        event_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
        starts_at: Optional[datetime] = None,
        ends_at: Optional[datetime] = None,
    ) -> Optional[Event]:
        await anyio.sleep(0)
        current = self._events.get(event_id)
        if current is None:
            return None
        changes = {
            key: value
            for key, value in {
                'name': name,
                'description': description,
                'location': location,
                'starts_at': starts_at,
                'ends_at': ends_at,
            }.items()
            if value is not None
        }
        updated = attrs.evolve(current, **changes, updated_at=self._now())
        self._events[event_id] = updated
        return attrs.evolve(updated)

    async def resize_capacity_if_unsold(
        self, *, event_id: UUID, total_tickets: int
    ) -> Optional[Event]:
        await anyio.sleep(0)
        current = self._events.get(event_id)
        if current is None or current.sold_tickets != 0:
            return None
        updated = current.with_capacity(total_tickets=total_tickets, at=self._now())
        self._events[event_id] = updated
        return attrs.evolve(updated)

    async def delete_event(self, *, event_id: UUID) -> bool:
        await anyio.sleep(0)
        return self._events.pop(event_id, None) is not None

    async def reserve_if_available(self, *, event_id: UUID, quantity: int) -> Optional[Event]:
        await anyio.sleep(0)
        current = self._events.get(event_id)
        if (
            current is None
            or current.status != EventStatus.ACTIVE
            or current.available_tickets < quantity
        ):
            return None
        updated = current.with_reservation(quantity=quantity, at=self._now())
        self._events[event_id] = updated
        return attrs.evolve(updated)

    async def release(self, *, event_id: UUID, quantity: int) -> Optional[tuple[Event, int]]:
        await anyio.sleep(0)
        current = self._events.get(event_id)
        if current is None:
            return None
        updated, released = current.with_release(quantity=quantity, at=self._now())
        self._events[event_id] = updated
        return attrs.evolve(updated), released

    async def compare_and_set_status(
        self, *, event_id: UUID, from_status: EventStatus, to_status: EventStatus
    ) -> Optional[Event]:
        await anyio.sleep(0)
        current = self._events.get(event_id)
        if current is None or current.status != from_status:
            return None
        updated = current.with_status(status=to_status, at=self._now())
        self._events[event_id] = updated
        return attrs.evolve(updated)
