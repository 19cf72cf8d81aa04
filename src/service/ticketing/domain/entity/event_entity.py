from datetime import datetime, timezone
from typing import Any, Dict, Optional

import attrs
from uuid_utils import UUID, uuid7

from src.platform.exception.exceptions import DomainError
from src.service.ticketing.domain.enum.event_status import EventStatus


DEFAULT_END_HOUR = 23
DEFAULT_END_MINUTE = 59


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _optional_utc(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(value) if value is not None else None


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


_non_negative = [attrs.validators.instance_of(int), attrs.validators.ge(0)]


@attrs.define
class Event:
    organizer_id: str = attrs.field(validator=_validate_non_empty_string)
    name: str = attrs.field(validator=_validate_non_empty_string)
    starts_at: datetime = attrs.field(converter=ensure_utc)
    total_tickets: int = attrs.field(validator=_non_negative)
    description: str = ''
    location: str = ''
    ends_at: Optional[datetime] = attrs.field(default=None, converter=_optional_utc)
    sold_tickets: int = attrs.field(default=0, validator=_non_negative)
    available_tickets: int = attrs.field(default=0, validator=_non_negative)
    status: EventStatus = EventStatus.DRAFT
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        organizer_id: str,
        name: str,
        starts_at: datetime,
        total_tickets: int,
        description: str = '',
        location: str = '',
        ends_at: Optional[datetime] = None,
        publish: bool = True,
    ) -> 'Event':
        if total_tickets < 0:
            raise DomainError('total_tickets must be zero or greater')
        if ends_at is not None and ensure_utc(ends_at) < ensure_utc(starts_at):
            raise DomainError('Event cannot end before it starts')

        now = datetime.now(timezone.utc)
        return cls(
            organizer_id=organizer_id,
            name=name,
            description=description,
            location=location,
            starts_at=starts_at,
            ends_at=ends_at,
            total_tickets=total_tickets,
            sold_tickets=0,
            available_tickets=total_tickets,
            status=EventStatus.ACTIVE if publish else EventStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )

    @property
    def effective_end_time(self) -> datetime:
        """End time, defaulting to 23:59 of the start date."""
        if self.ends_at is not None:
            return self.ends_at
        return self.starts_at.replace(
            hour=DEFAULT_END_HOUR, minute=DEFAULT_END_MINUTE, second=0, microsecond=0
        )

    @property
    def accepts_bookings(self) -> bool:
        return self.status == EventStatus.ACTIVE

    @property
    def ledger_is_consistent(self) -> bool:
        return (
            self.sold_tickets >= 0
            and self.available_tickets >= 0
            and self.sold_tickets + self.available_tickets == self.total_tickets
        )

    def with_reservation(self, *, quantity: int, at: datetime) -> 'Event':
        return attrs.evolve(
            self,
            sold_tickets=self.sold_tickets + quantity,
            available_tickets=self.available_tickets - quantity,
            updated_at=at,
        )

    def with_release(self, *, quantity: int, at: datetime) -> tuple['Event', int]:
        """Release up to `quantity`, clamped to what was sold. Returns (event, released)."""
        released = min(quantity, self.sold_tickets)
        event = attrs.evolve(
            self,
            sold_tickets=self.sold_tickets - released,
            available_tickets=self.available_tickets + released,
            updated_at=at,
        )
        return event, released

    def with_status(self, *, status: EventStatus, at: datetime) -> 'Event':
        return attrs.evolve(self, status=status, updated_at=at)

    def with_capacity(self, *, total_tickets: int, at: datetime) -> 'Event':
        """Resize before any sales; counters stay consistent."""
        return attrs.evolve(
            self,
            total_tickets=total_tickets,
            available_tickets=total_tickets - self.sold_tickets,
            updated_at=at,
        )

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'organizer_id': self.organizer_id,
            'name': self.name,
            'description': self.description,
            'location': self.location,
            'starts_at': self.starts_at.isoformat(),
            'ends_at': self.ends_at.isoformat() if self.ends_at else None,
            'total_tickets': self.total_tickets,
            'sold_tickets': self.sold_tickets,
            'available_tickets': self.available_tickets,
            'status': self.status.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> 'Event':
        def _dt(value: Optional[str]) -> Optional[datetime]:
            return datetime.fromisoformat(value) if value else None

        return cls(
            id=UUID(data['id']),
            organizer_id=data['organizer_id'],
            name=data['name'],
            description=data.get('description', ''),
            location=data.get('location', ''),
            starts_at=datetime.fromisoformat(data['starts_at']),
            ends_at=_dt(data.get('ends_at')),
            total_tickets=data['total_tickets'],
            sold_tickets=data['sold_tickets'],
            available_tickets=data['available_tickets'],
            status=EventStatus(data['status']),
            created_at=_dt(data.get('created_at')),
            updated_at=_dt(data.get('updated_at')),
        )
