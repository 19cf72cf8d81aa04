"""Domain Events"""

from src.service.ticketing.domain.domain_event.archive_domain_event import (
    EventArchivedDomainEvent,
    EventRestoredDomainEvent,
)
from src.service.ticketing.domain.domain_event.booking_domain_event import (
    BookingCancelledDomainEvent,
    BookingConfirmedDomainEvent,
)

__all__ = [
    'BookingCancelledDomainEvent',
    'BookingConfirmedDomainEvent',
    'EventArchivedDomainEvent',
    'EventRestoredDomainEvent',
]
