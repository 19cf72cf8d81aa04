from datetime import datetime, timedelta, timezone

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus, is_valid_transition
from test.service.ticketing.fixtures import build_event
from test.util_constant import EVENT_STARTS_AT, ORGANIZER_ID


@pytest.mark.unit
class TestEventCreate:
    def test_create_opens_all_capacity(self) -> None:
        event = Event.create(
            organizer_id=ORGANIZER_ID, name='Meetup', starts_at=EVENT_STARTS_AT, total_tickets=100
        )

        assert event.status == EventStatus.ACTIVE
        assert event.sold_tickets == 0
        assert event.available_tickets == 100
        assert event.ledger_is_consistent

    def test_create_unpublished_is_draft(self) -> None:
        event = Event.create(
            organizer_id=ORGANIZER_ID,
            name='Meetup',
            starts_at=EVENT_STARTS_AT,
            total_tickets=10,
            publish=False,
        )

        assert event.status == EventStatus.DRAFT
        assert not event.accepts_bookings

    def test_zero_capacity_is_allowed(self) -> None:
        event = Event.create(
            organizer_id=ORGANIZER_ID, name='Waitlist', starts_at=EVENT_STARTS_AT, total_tickets=0
        )

        assert event.available_tickets == 0
        assert event.ledger_is_consistent

    def test_negative_capacity_rejected(self) -> None:
        with pytest.raises(DomainError):
            Event.create(
                organizer_id=ORGANIZER_ID, name='Bad', starts_at=EVENT_STARTS_AT, total_tickets=-1
            )

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(DomainError, match='end before it starts'):
            Event.create(
                organizer_id=ORGANIZER_ID,
                name='Bad',
                starts_at=EVENT_STARTS_AT,
                ends_at=EVENT_STARTS_AT - timedelta(hours=1),
                total_tickets=5,
            )

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            Event.create(
                organizer_id=ORGANIZER_ID, name='   ', starts_at=EVENT_STARTS_AT, total_tickets=5
            )

    def test_naive_start_is_treated_as_utc(self) -> None:
        event = Event.create(
            organizer_id=ORGANIZER_ID,
            name='Meetup',
            starts_at=datetime(2026, 11, 20, 18, 0),
            total_tickets=5,
        )

        assert event.starts_at.tzinfo == timezone.utc


@pytest.mark.unit
class TestEventCounters:
    def test_reservation_keeps_counters_consistent(self) -> None:
        event = build_event(total_tickets=10)

        updated = event.with_reservation(quantity=3, at=datetime.now(timezone.utc))

        assert (updated.sold_tickets, updated.available_tickets) == (3, 7)
        assert updated.ledger_is_consistent
        # Original untouched
        assert event.sold_tickets == 0

    def test_release_is_clamped_to_sold(self) -> None:
        event = build_event(total_tickets=10).with_reservation(
            quantity=2, at=datetime.now(timezone.utc)
        )

        updated, released = event.with_release(quantity=5, at=datetime.now(timezone.utc))

        assert released == 2
        assert (updated.sold_tickets, updated.available_tickets) == (0, 10)

    def test_effective_end_defaults_to_end_of_start_day(self) -> None:
        event = build_event(ends_at=None)

        assert event.effective_end_time == EVENT_STARTS_AT.replace(hour=23, minute=59)

    def test_snapshot_round_trip_preserves_counters(self) -> None:
        event = build_event(total_tickets=10).with_reservation(
            quantity=4, at=datetime.now(timezone.utc)
        )

        copy = Event.from_snapshot(event.to_snapshot())

        assert copy == event


@pytest.mark.unit
class TestLifecycleTransitions:
    @pytest.mark.parametrize(
        'from_status,to_status',
        [
            (EventStatus.DRAFT, EventStatus.ACTIVE),
            (EventStatus.ACTIVE, EventStatus.ARCHIVED),
            (EventStatus.ACTIVE, EventStatus.CANCELLED),
            (EventStatus.ARCHIVED, EventStatus.ACTIVE),
        ],
    )
    def test_allowed(self, from_status: EventStatus, to_status: EventStatus) -> None:
        assert is_valid_transition(from_status, to_status)

    @pytest.mark.parametrize(
        'from_status,to_status',
        [
            (EventStatus.CANCELLED, EventStatus.ACTIVE),
            (EventStatus.DRAFT, EventStatus.ARCHIVED),
            (EventStatus.ARCHIVED, EventStatus.CANCELLED),
            (EventStatus.ACTIVE, EventStatus.DRAFT),
        ],
    )
    def test_rejected(self, from_status: EventStatus, to_status: EventStatus) -> None:
        assert not is_valid_transition(from_status, to_status)
