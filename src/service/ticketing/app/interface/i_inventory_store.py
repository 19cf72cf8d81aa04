"""
Inventory Store Interface

The only place event counters and lifecycle status are written. Every mutating
method is a single conditional write: it either commits against the state named in
its guard or reports a miss, so the ledger never has to read, decide and write back.
Whether that is an UPDATE ... WHERE ... RETURNING or a compare-and-swap is up to
the implementation.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from uuid_utils import UUID

from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus


class IInventoryStore(ABC):
    @abstractmethod
    async def create_event(self, *, event: Event) -> Event:
        """Insert a new event row (also used to re-create a deleted row on restore)."""
        pass

    @abstractmethod
    async def get_event(self, *, event_id: UUID) -> Optional[Event]:
        pass

    @abstractmethod
    async def list_events(
        self,
        *,
        status: Optional[EventStatus] = None,
        organizer_id: Optional[str] = None,
    ) -> List[Event]:
        """List events ordered by start time, optionally filtered."""
        pass

    @abstractmethod
    async def count_by_status(
        self, *, organizer_id: Optional[str] = None
    ) -> dict[EventStatus, int]:
        pass

    @abstractmethod
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
        """
        Last-write-wins update of organizer-editable fields. Never touches counters or status.

        Returns:
            Updated event or None when the event does not exist
        """
        pass

    @abstractmethod
    async def resize_capacity_if_unsold(
        self, *, event_id: UUID, total_tickets: int
    ) -> Optional[Event]:
        """
        Set total (and available) capacity, guarded by sold_tickets == 0.

        Returns:
            Updated event, or None when the event is missing or has sales
        """
        pass

    @abstractmethod
    async def delete_event(self, *, event_id: UUID) -> bool:
        pass

    @abstractmethod
    async def reserve_if_available(self, *, event_id: UUID, quantity: int) -> Optional[Event]:
        """
        Atomically move `quantity` from available to sold.

        Guard: status == ACTIVE and available_tickets >= quantity.

        Returns:
            The committed row, or None when the guard did not match

        Raises:
            StorageConflictError: transient contention, safe to retry
        """
        pass

    @abstractmethod
    async def release(self, *, event_id: UUID, quantity: int) -> Optional[tuple[Event, int]]:
        """
        Atomically move up to `quantity` from sold back to available.

        The amount is clamped to sold_tickets so counters can never go negative.

        Returns:
            (committed row, units actually released), or None when the event is missing

        Raises:
            StorageConflictError: transient contention, safe to retry
        """
        pass

    @abstractmethod
    async def compare_and_set_status(
        self, *, event_id: UUID, from_status: EventStatus, to_status: EventStatus
    ) -> Optional[Event]:
        """
        Change lifecycle status only if it currently equals `from_status`.

        Returns:
            The committed row (a consistent snapshot of that instant), or None on mismatch
        """
        pass
