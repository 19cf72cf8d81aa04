from enum import StrEnum


class BookingStatus(StrEnum):
    """CONFIRMED is the only entry state; CANCELLED is terminal."""

    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


class BookingKind(StrEnum):
    PURCHASE = 'purchase'
    RSVP = 'rsvp'
