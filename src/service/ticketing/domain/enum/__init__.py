"""Ticketing Domain Enums"""

from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.domain.enum.booking_status import BookingKind, BookingStatus
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.notification_kind import NotificationKind

__all__ = ['ArchiveReason', 'BookingKind', 'BookingStatus', 'EventStatus', 'NotificationKind']
