"""
Event Lifecycle Status - Domain Value Object

Only ACTIVE events accept bookings. The status column is owned by the inventory
ledger and only changes through guarded compare-and-set transitions.
"""

from enum import StrEnum


class EventStatus(StrEnum):
    DRAFT = 'draft'
    ACTIVE = 'active'
    ARCHIVED = 'archived'
    CANCELLED = 'cancelled'


VALID_LIFECYCLE_TRANSITIONS: frozenset[tuple[EventStatus, EventStatus]] = frozenset(
    {
        (EventStatus.DRAFT, EventStatus.ACTIVE),
        (EventStatus.ACTIVE, EventStatus.ARCHIVED),
        (EventStatus.ACTIVE, EventStatus.CANCELLED),
        (EventStatus.ARCHIVED, EventStatus.ACTIVE),  # restore
    }
)


def is_valid_transition(from_status: EventStatus, to_status: EventStatus) -> bool:
    return (from_status, to_status) in VALID_LIFECYCLE_TRANSITIONS
