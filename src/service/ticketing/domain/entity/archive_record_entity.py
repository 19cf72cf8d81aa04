from datetime import datetime, timezone
from typing import Optional

import attrs
from uuid_utils import UUID, uuid7

from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason


@attrs.frozen
class ArchiveRecord:
    """Point-in-time copy of an Event taken at the lifecycle transition that retired it."""

    event_id: UUID
    organizer_id: str
    snapshot: Event
    reason: ArchiveReason
    archived_at: datetime
    archived_by: Optional[str] = None
    restored_at: Optional[datetime] = None
    restored_by: Optional[str] = None
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def capture(
        cls, *, event: Event, reason: ArchiveReason, actor_id: Optional[str]
    ) -> 'ArchiveRecord':
        # Copy so later mutation of the live entity can never leak into the snapshot
        snapshot = Event.from_snapshot(event.to_snapshot())
        return cls(
            event_id=event.id,
            organizer_id=event.organizer_id,
            snapshot=snapshot,
            reason=reason,
            archived_by=actor_id,
            archived_at=datetime.now(timezone.utc),
        )

    @property
    def is_restored(self) -> bool:
        return self.restored_at is not None

    def mark_restored(self, *, actor_id: Optional[str], at: datetime) -> 'ArchiveRecord':
        return attrs.evolve(self, restored_at=at, restored_by=actor_id)


@attrs.frozen
class ArchiveLogEntry:
    event_id: UUID
    action: ArchiveReason
    archive_id: Optional[UUID] = None
    actor_id: Optional[str] = None
    created_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))
    id: UUID = attrs.field(factory=uuid7)

