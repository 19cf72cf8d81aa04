"""Unit tests for event create / publish / update / delete and the read-side queries."""

from datetime import timedelta

import pytest
from uuid_utils import uuid7

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
)
from src.service.ticketing.app.command.create_event_use_case import CreateEventUseCase
from src.service.ticketing.app.command.delete_event_use_case import DeleteEventUseCase
from src.service.ticketing.app.command.publish_event_use_case import PublishEventUseCase
from src.service.ticketing.app.command.update_event_details_use_case import (
    UpdateEventDetailsUseCase,
)
from src.service.ticketing.app.query.get_attendees_for_event_use_case import (
    GetAttendeesForEventUseCase,
)
from src.service.ticketing.app.query.get_booking_use_case import GetBookingUseCase
from src.service.ticketing.app.query.get_event_use_case import GetEventUseCase
from src.service.ticketing.app.query.list_archived_events_use_case import (
    ListArchivedEventsUseCase,
)
from src.service.ticketing.app.query.list_events_use_case import ListEventsUseCase
from src.service.ticketing.app.query.list_user_bookings_use_case import (
    ListUserBookingsUseCase,
)
from src.service.ticketing.domain.enum.booking_status import BookingStatus
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.value_object.attendee_info import AttendeeInfo
from test.service.ticketing.fixtures import InMemoryWorld
from test.util_constant import (
    ANOTHER_BUYER_ID,
    ANOTHER_ORGANIZER_ID,
    BUYER_ID,
    EVENT_STARTS_AT,
    ORGANIZER_ID,
    RSVP_EMAIL,
)


@pytest.fixture
def world() -> InMemoryWorld:
    return InMemoryWorld()


@pytest.mark.unit
class TestCreateAndPublishEvent:
    @pytest.mark.asyncio
    async def test_create_event(self, world: InMemoryWorld) -> None:
        use_case = CreateEventUseCase(inventory_store=world.inventory_store)

        event = await use_case.create_event(
            organizer_id=ORGANIZER_ID, name='Launch', starts_at=EVENT_STARTS_AT, total_tickets=100
        )

        stored = await world.inventory_store.get_event(event_id=event.id)
        assert stored is not None
        assert (stored.status, stored.sold_tickets, stored.available_tickets) == (
            EventStatus.ACTIVE,
            0,
            100,
        )

    @pytest.mark.asyncio
    async def test_draft_then_publish(self, world: InMemoryWorld) -> None:
        draft = await CreateEventUseCase(inventory_store=world.inventory_store).create_event(
            organizer_id=ORGANIZER_ID,
            name='Launch',
            starts_at=EVENT_STARTS_AT,
            total_tickets=10,
            publish=False,
        )
        use_case = PublishEventUseCase(inventory_store=world.inventory_store, ledger=world.ledger)

        published = await use_case.publish(event_id=draft.id, actor_id=ORGANIZER_ID)

        assert published.status == EventStatus.ACTIVE
        with pytest.raises(InvalidTransitionError):
            await use_case.publish(event_id=draft.id, actor_id=ORGANIZER_ID)

    @pytest.mark.asyncio
    async def test_publish_by_someone_else(self, world: InMemoryWorld) -> None:
        draft = await world.add_event(status=EventStatus.DRAFT)
        use_case = PublishEventUseCase(inventory_store=world.inventory_store, ledger=world.ledger)

        with pytest.raises(ForbiddenError):
            await use_case.publish(event_id=draft.id, actor_id=ANOTHER_ORGANIZER_ID)


@pytest.mark.unit
class TestUpdateEventDetails:
    @pytest.mark.asyncio
    async def test_descriptive_fields_update(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        use_case = UpdateEventDetailsUseCase(inventory_store=world.inventory_store)

        updated = await use_case.update_details(
            event_id=event.id, actor_id=ORGANIZER_ID, name='Renamed', location='Hall B'
        )

        assert (updated.name, updated.location) == ('Renamed', 'Hall B')
        assert updated.total_tickets == event.total_tickets

    @pytest.mark.asyncio
    async def test_resize_before_sales(self, world: InMemoryWorld) -> None:
        event = await world.add_event(total_tickets=10)
        use_case = UpdateEventDetailsUseCase(inventory_store=world.inventory_store)

        updated = await use_case.update_details(
            event_id=event.id, actor_id=ORGANIZER_ID, total_tickets=25
        )

        assert (updated.total_tickets, updated.available_tickets) == (25, 25)

    @pytest.mark.asyncio
    async def test_resize_after_sales_rejected(self, world: InMemoryWorld) -> None:
        """
        GIVEN: One ticket sold
        WHEN: The organizer changes capacity
        THEN: ConflictError and counters unchanged
        """
        event = await world.add_event(total_tickets=10)
        await world.create_booking().create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=1
        )
        use_case = UpdateEventDetailsUseCase(inventory_store=world.inventory_store)

        with pytest.raises(ConflictError):
            await use_case.update_details(
                event_id=event.id, actor_id=ORGANIZER_ID, total_tickets=5
            )

        stored = await world.inventory_store.get_event(event_id=event.id)
        assert stored is not None
        assert (stored.total_tickets, stored.sold_tickets, stored.available_tickets) == (10, 1, 9)

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        use_case = UpdateEventDetailsUseCase(inventory_store=world.inventory_store)

        with pytest.raises(DomainError):
            await use_case.update_details(
                event_id=event.id,
                actor_id=ORGANIZER_ID,
                ends_at=event.starts_at - timedelta(minutes=1),
            )

    @pytest.mark.asyncio
    async def test_only_organizer_may_update(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        use_case = UpdateEventDetailsUseCase(inventory_store=world.inventory_store)

        with pytest.raises(ForbiddenError):
            await use_case.update_details(
                event_id=event.id, actor_id=ANOTHER_ORGANIZER_ID, name='Mine now'
            )


@pytest.mark.unit
class TestDeleteEvent:
    @pytest.mark.asyncio
    async def test_delete(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        use_case = DeleteEventUseCase(inventory_store=world.inventory_store)

        await use_case.delete(event_id=event.id, actor_id=ORGANIZER_ID)

        assert await world.inventory_store.get_event(event_id=event.id) is None
        with pytest.raises(NotFoundError):
            await use_case.delete(event_id=event.id, actor_id=ORGANIZER_ID)

    @pytest.mark.asyncio
    async def test_delete_by_someone_else(self, world: InMemoryWorld) -> None:
        event = await world.add_event()

        with pytest.raises(ForbiddenError):
            await DeleteEventUseCase(inventory_store=world.inventory_store).delete(
                event_id=event.id, actor_id=ANOTHER_ORGANIZER_ID
            )


@pytest.mark.unit
class TestQueries:
    @pytest.mark.asyncio
    async def test_get_event(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        use_case = GetEventUseCase(inventory_store=world.inventory_store)

        assert (await use_case.get_by_id(event_id=event.id)).id == event.id
        with pytest.raises(NotFoundError):
            await use_case.get_by_id(event_id=uuid7())

    @pytest.mark.asyncio
    async def test_list_available_skips_inactive(self, world: InMemoryWorld) -> None:
        active = await world.add_event()
        await world.add_event(status=EventStatus.DRAFT)
        await world.add_event(status=EventStatus.ARCHIVED)
        use_case = ListEventsUseCase(inventory_store=world.inventory_store)

        assert [e.id for e in await use_case.list_available()] == [active.id]
        assert len(await use_case.list_events()) == 3
        assert len(await use_case.list_events(organizer_id=ANOTHER_ORGANIZER_ID)) == 0

    @pytest.mark.asyncio
    async def test_attendees_exclude_cancelled_by_default(self, world: InMemoryWorld) -> None:
        event = await world.add_event(total_tickets=10)
        create = world.create_booking()
        kept = await create.create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=1
        )
        dropped = await create.create_booking(
            event_id=event.id, attendee=AttendeeInfo(email=RSVP_EMAIL), quantity=1
        )
        await world.cancel_booking().cancel_booking(booking_id=dropped.id)
        use_case = GetAttendeesForEventUseCase(
            inventory_store=world.inventory_store, booking_store=world.booking_store
        )

        confirmed = await use_case.get_attendees(event_id=event.id, requester_id=ORGANIZER_ID)
        everyone = await use_case.get_attendees(
            event_id=event.id, requester_id=ORGANIZER_ID, include_cancelled=True
        )

        assert [b.id for b in confirmed] == [kept.id]
        assert {b.id for b in everyone} == {kept.id, dropped.id}
        with pytest.raises(ForbiddenError):
            await use_case.get_attendees(event_id=event.id, requester_id=BUYER_ID)

    @pytest.mark.asyncio
    async def test_booking_lookups(self, world: InMemoryWorld) -> None:
        event = await world.add_event(total_tickets=10)
        create = world.create_booking()
        first = await create.create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=1
        )
        second = await create.create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=2
        )
        await world.cancel_booking().cancel_booking(booking_id=first.id, requester_id=BUYER_ID)
        get_booking = GetBookingUseCase(booking_store=world.booking_store)
        list_bookings = ListUserBookingsUseCase(booking_store=world.booking_store)

        assert (await get_booking.get_by_reference(reference=second.reference)).id == second.id
        with pytest.raises(ForbiddenError):
            await get_booking.get_booking(booking_id=second.id, requester_id=ANOTHER_BUYER_ID)
        confirmed = await list_bookings.list_user_bookings(
            user_id=BUYER_ID, status=BookingStatus.CONFIRMED
        )
        assert [b.id for b in confirmed] == [second.id]
        assert len(await list_bookings.list_user_bookings(user_id=BUYER_ID)) == 2

    @pytest.mark.asyncio
    async def test_list_archived_hides_restored(self, world: InMemoryWorld) -> None:
        kept = await world.add_event()
        restored = await world.add_event()
        archive = world.archive_event()
        kept_record = await archive.archive(event_id=kept.id, actor_id=ORGANIZER_ID)
        restored_record = await archive.archive(event_id=restored.id, actor_id=ORGANIZER_ID)
        await world.restore_event().restore(archive_id=restored_record.id)
        use_case = ListArchivedEventsUseCase(archive_store=world.archive_store)

        records = await use_case.list_archived(organizer_id=ORGANIZER_ID)

        assert [r.id for r in records] == [kept_record.id]
