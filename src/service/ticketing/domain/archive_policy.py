from datetime import datetime, timedelta, timezone
from typing import Optional

from src.service.ticketing.domain.entity.event_entity import Event, ensure_utc


DEFAULT_ARCHIVE_BUFFER_HOURS = 24


def archive_cutoff(event: Event, buffer_hours: float = DEFAULT_ARCHIVE_BUFFER_HOURS) -> datetime:
    return event.effective_end_time + timedelta(hours=buffer_hours)


def is_eligible_for_archive(
    event: Event,
    buffer_hours: float = DEFAULT_ARCHIVE_BUFFER_HOURS,
    now: Optional[datetime] = None,
) -> bool:
    """
    True once the event ended more than `buffer_hours` ago.

    The grace window leaves room for late check-ins and disputes before the event
    leaves the active pool. Pure: the clock is only read when `now` is omitted.
    """
    if buffer_hours < 0:
        raise ValueError('buffer_hours must be zero or greater')
    current = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    return current >= archive_cutoff(event, buffer_hours)
