"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production, the archive CLI and test environments.
"""

from types import ModuleType

from src.service.ticketing.app.command import (
    archive_batch_use_case,
    archive_event_use_case,
    cancel_booking_use_case,
    cleanup_archive_logs_use_case,
    create_booking_use_case,
    create_event_use_case,
    delete_event_use_case,
    publish_event_use_case,
    restore_event_use_case,
    update_event_details_use_case,
)
from src.service.ticketing.app.query import (
    get_archive_stats_use_case,
    get_attendees_for_event_use_case,
    get_booking_use_case,
    get_event_use_case,
    list_archived_events_use_case,
    list_events_use_case,
    list_user_bookings_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    create_event_use_case,
    publish_event_use_case,
    update_event_details_use_case,
    delete_event_use_case,
    create_booking_use_case,
    cancel_booking_use_case,
    archive_event_use_case,
    archive_batch_use_case,
    restore_event_use_case,
    cleanup_archive_logs_use_case,
    get_event_use_case,
    list_events_use_case,
    get_attendees_for_event_use_case,
    get_booking_use_case,
    list_user_bookings_use_case,
    list_archived_events_use_case,
    get_archive_stats_use_case,
]
