from enum import StrEnum


class NotificationKind(StrEnum):
    BOOKING_CONFIRMED = 'booking_confirmed'
    RSVP_CONFIRMED = 'rsvp_confirmed'
    BOOKING_CANCELLED = 'booking_cancelled'
    EVENT_ARCHIVED = 'event_archived'
    EVENT_CANCELLED = 'event_cancelled'
    EVENT_RESTORED = 'event_restored'
