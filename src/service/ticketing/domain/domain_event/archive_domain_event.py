"""Archival Domain Events, sent to the organizer over the notification channel"""

from datetime import datetime
from typing import Any, Optional

import attrs
from uuid_utils import UUID

from src.service.ticketing.domain.entity.archive_record_entity import ArchiveRecord
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.domain.enum.notification_kind import NotificationKind


@attrs.define
class EventArchivedDomainEvent:
    archive_id: UUID
    event_id: UUID
    organizer_id: str
    event_name: str
    reason: ArchiveReason
    sold_tickets: int
    archived_at: datetime

    @classmethod
    def from_record(cls, *, record: ArchiveRecord) -> 'EventArchivedDomainEvent':
        return cls(
            archive_id=record.id,
            event_id=record.event_id,
            organizer_id=record.organizer_id,
            event_name=record.snapshot.name,
            reason=record.reason,
            sold_tickets=record.snapshot.sold_tickets,
            archived_at=record.archived_at,
        )

    @property
    def template_kind(self) -> NotificationKind:
        if self.reason == ArchiveReason.CANCELLED:
            return NotificationKind.EVENT_CANCELLED
        return NotificationKind.EVENT_ARCHIVED

    def to_payload(self) -> dict[str, Any]:
        return {
            'archive_id': str(self.archive_id),
            'event_id': str(self.event_id),
            'event_name': self.event_name,
            'reason': self.reason.value,
            'sold_tickets': self.sold_tickets,
            'archived_at': self.archived_at.isoformat(),
        }


@attrs.define
class EventRestoredDomainEvent:
    archive_id: UUID
    event_id: UUID
    organizer_id: str
    event_name: str
    restored_by: Optional[str]

    @classmethod
    def from_event(
        cls, *, event: Event, archive_id: UUID, restored_by: Optional[str]
    ) -> 'EventRestoredDomainEvent':
        return cls(
            archive_id=archive_id,
            event_id=event.id,
            organizer_id=event.organizer_id,
            event_name=event.name,
            restored_by=restored_by,
        )

    @property
    def template_kind(self) -> NotificationKind:
        return NotificationKind.EVENT_RESTORED

    def to_payload(self) -> dict[str, Any]:
        return {
            'archive_id': str(self.archive_id),
            'event_id': str(self.event_id),
            'event_name': self.event_name,
            'restored_by': self.restored_by,
        }
