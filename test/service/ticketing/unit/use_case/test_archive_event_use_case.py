"""
Unit tests for ArchiveEventUseCase / RestoreEventUseCase

Flow under test:
1. Ledger transition active -> archived (or cancelled)
2. Archive record holds the row as committed by that transition
3. Restore reuses the live row or rebuilds it from the snapshot
"""

from unittest.mock import AsyncMock

import anyio
import pytest
from uuid_utils import uuid7

from src.platform.exception.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    NotActiveError,
    NotFoundError,
)
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.notification_kind import NotificationKind
from src.service.ticketing.domain.value_object.attendee_info import AttendeeInfo
from test.service.ticketing.fixtures import InMemoryWorld
from test.util_constant import ANOTHER_ORGANIZER_ID, BUYER_ID, ORGANIZER_ID


@pytest.fixture
def world() -> InMemoryWorld:
    return InMemoryWorld()


@pytest.mark.unit
class TestArchiveEvent:
    @pytest.mark.asyncio
    async def test_archive_snapshots_committed_counters(self, world: InMemoryWorld) -> None:
        # Arrange
        event = await world.add_event(total_tickets=100)
        await world.create_booking().create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=30
        )

        # Act
        record = await world.archive_event().archive(
            event_id=event.id, reason=ArchiveReason.MANUAL, actor_id=ORGANIZER_ID
        )

        # Assert
        assert record.reason == ArchiveReason.MANUAL
        assert record.archived_by == ORGANIZER_ID
        assert record.snapshot.status == EventStatus.ARCHIVED
        assert (record.snapshot.sold_tickets, record.snapshot.available_tickets) == (30, 70)
        live = await world.inventory_store.get_event(event_id=event.id)
        assert live is not None and live.status == EventStatus.ARCHIVED

        logs = await world.archive_store.list_logs(event_id=event.id)
        assert [entry.action for entry in logs] == [ArchiveReason.MANUAL]
        assert (
            world.dispatcher.notify.call_args.kwargs['template_kind']
            == NotificationKind.EVENT_ARCHIVED
        )

    @pytest.mark.asyncio
    async def test_archive_is_idempotent(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        use_case = world.archive_event()
        first = await use_case.archive(event_id=event.id, actor_id=ORGANIZER_ID)

        second = await use_case.archive(event_id=event.id, actor_id=ORGANIZER_ID)

        assert second.id == first.id
        assert len(await world.archive_store.list_records()) == 1

    @pytest.mark.asyncio
    async def test_archived_event_refuses_bookings(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)

        with pytest.raises(NotActiveError):
            await world.create_booking().create_booking(
                event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=1
            )

    @pytest.mark.asyncio
    async def test_cancel_reason_moves_event_to_cancelled(self, world: InMemoryWorld) -> None:
        event = await world.add_event()

        record = await world.archive_event().archive(
            event_id=event.id, reason=ArchiveReason.CANCELLED, actor_id=ORGANIZER_ID
        )

        assert record.snapshot.status == EventStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_draft_event_cannot_be_archived(self, world: InMemoryWorld) -> None:
        event = await world.add_event(status=EventStatus.DRAFT)

        with pytest.raises(InvalidTransitionError):
            await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)

        assert await world.archive_store.list_records() == []

    @pytest.mark.asyncio
    async def test_only_organizer_may_archive(self, world: InMemoryWorld) -> None:
        event = await world.add_event()

        with pytest.raises(ForbiddenError):
            await world.archive_event().archive(event_id=event.id, actor_id=ANOTHER_ORGANIZER_ID)

    @pytest.mark.asyncio
    async def test_automatic_archive_needs_no_actor(self, world: InMemoryWorld) -> None:
        event = await world.add_event()

        record = await world.archive_event().archive(
            event_id=event.id, reason=ArchiveReason.AUTOMATIC
        )

        assert record.archived_by is None

    @pytest.mark.asyncio
    async def test_unknown_event(self, world: InMemoryWorld) -> None:
        with pytest.raises(NotFoundError):
            await world.archive_event().archive(event_id=uuid7(), reason=ArchiveReason.AUTOMATIC)

    @pytest.mark.asyncio
    async def test_record_write_failure_reverts_transition(self, world: InMemoryWorld) -> None:
        """
        GIVEN: The ledger transition succeeds
        WHEN: Writing the archive record fails
        THEN: The event is active again and the error propagates
        """
        event = await world.add_event()
        world.archive_store.create_record = AsyncMock(side_effect=RuntimeError('store down'))

        with pytest.raises(RuntimeError, match='store down'):
            await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)

        live = await world.inventory_store.get_event(event_id=event.id)
        assert live is not None and live.status == EventStatus.ACTIVE
        world.dispatcher.notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_audit_log_failure_does_not_fail_archive(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        world.archive_store.append_log = AsyncMock(side_effect=RuntimeError('log down'))

        record = await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)

        assert await world.archive_store.get_record(archive_id=record.id) == record

    @pytest.mark.asyncio
    async def test_restored_is_not_an_archive_reason(self, world: InMemoryWorld) -> None:
        event = await world.add_event()

        with pytest.raises(ValueError):
            await world.archive_event().archive(
                event_id=event.id, reason=ArchiveReason.RESTORED, actor_id=ORGANIZER_ID
            )


    @pytest.mark.asyncio
    async def test_overlapping_archives_return_the_same_record(
        self, world: InMemoryWorld
    ) -> None:
        """
        GIVEN: Writing the archive record takes a while
        WHEN: An organizer archive and the scheduled archive run at the same time
        THEN: Both callers get the one record, no error, one notification
        """
        # Arrange
        event = await world.add_event()
        write_record = world.archive_store.create_record

        async def _slow_write(*, record):
            await anyio.sleep(0.05)
            return await write_record(record=record)

        world.archive_store.create_record = AsyncMock(side_effect=_slow_write)
        use_case = world.archive_event(record_wait_attempts=20, record_wait_seconds=0.02)
        results: list = []

        async def _archive(reason: ArchiveReason, actor_id) -> None:
            results.append(
                await use_case.archive(event_id=event.id, reason=reason, actor_id=actor_id)
            )

        # Act
        async with anyio.create_task_group() as tg:
            tg.start_soon(_archive, ArchiveReason.MANUAL, ORGANIZER_ID)
            tg.start_soon(_archive, ArchiveReason.AUTOMATIC, None)

        # Assert
        assert len(results) == 2
        assert results[0].id == results[1].id
        assert len(await world.archive_store.list_records()) == 1
        assert world.archive_store.create_record.await_count == 1
        world.dispatcher.notify.assert_called_once()

    @pytest.mark.asyncio
    async def test_lost_race_without_visible_record_is_a_no_op(
        self, world: InMemoryWorld
    ) -> None:
        """
        GIVEN: Another archiver flips the event but its record never becomes visible
        WHEN: This archiver loses the transition
        THEN: The event is reported as archived, nothing is written or sent
        """
        event = await world.add_event()

        async def _flipped_elsewhere(*, event_id, from_status, to_status):
            await world.inventory_store.compare_and_set_status(
                event_id=event_id, from_status=from_status, to_status=to_status
            )
            raise InvalidTransitionError('expected active')

        world.ledger.transition_lifecycle = AsyncMock(side_effect=_flipped_elsewhere)

        record = await world.archive_event(record_wait_attempts=3).archive(
            event_id=event.id, reason=ArchiveReason.AUTOMATIC
        )

        assert record.event_id == event.id
        assert record.snapshot.status == EventStatus.ARCHIVED
        assert await world.archive_store.list_records() == []
        world.dispatcher.notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_lost_race_to_a_different_status_still_fails(
        self, world: InMemoryWorld
    ) -> None:
        event = await world.add_event()
        await world.archive_event().archive(
            event_id=event.id, reason=ArchiveReason.CANCELLED, actor_id=ORGANIZER_ID
        )

        with pytest.raises(InvalidTransitionError):
            await world.archive_event().archive(
                event_id=event.id, reason=ArchiveReason.AUTOMATIC
            )


@pytest.mark.unit
class TestRestoreEvent:
    @pytest.mark.asyncio
    async def test_archive_then_restore_round_trip(self, world: InMemoryWorld) -> None:
        """
        GIVEN: Active event with 30 of 100 sold, archived
        WHEN: The organizer restores it
        THEN: Active again with the same counters, record stamped, bookings accepted
        """
        event = await world.add_event(total_tickets=100)
        await world.create_booking().create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=30
        )
        record = await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)

        restored = await world.restore_event().restore(archive_id=record.id, actor_id=ORGANIZER_ID)

        assert restored.status == EventStatus.ACTIVE
        assert (restored.sold_tickets, restored.available_tickets) == (30, 70)
        stamped = await world.archive_store.get_record(archive_id=record.id)
        assert stamped is not None
        assert stamped.restored_by == ORGANIZER_ID
        assert stamped.is_restored
        logs = await world.archive_store.list_logs(event_id=event.id)
        assert [entry.action for entry in logs] == [ArchiveReason.MANUAL, ArchiveReason.RESTORED]

        await world.create_booking().create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=1
        )

    @pytest.mark.asyncio
    async def test_restore_rebuilds_deleted_row(self, world: InMemoryWorld) -> None:
        event = await world.add_event(total_tickets=50)
        await world.create_booking().create_booking(
            event_id=event.id, attendee=AttendeeInfo(user_id=BUYER_ID), quantity=5
        )
        record = await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)
        await world.inventory_store.delete_event(event_id=event.id)

        restored = await world.restore_event().restore(archive_id=record.id)

        assert restored.id == event.id
        assert restored.status == EventStatus.ACTIVE
        assert (restored.total_tickets, restored.sold_tickets) == (50, 5)
        assert restored.ledger_is_consistent

    @pytest.mark.asyncio
    async def test_restore_twice_is_harmless(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        record = await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)
        use_case = world.restore_event()
        await use_case.restore(archive_id=record.id)

        again = await use_case.restore(archive_id=record.id)

        assert again.status == EventStatus.ACTIVE
        logs = await world.archive_store.list_logs(event_id=event.id)
        assert [entry.action for entry in logs].count(ArchiveReason.RESTORED) == 1

    @pytest.mark.asyncio
    async def test_cancelled_event_cannot_be_restored(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        record = await world.archive_event().archive(
            event_id=event.id, reason=ArchiveReason.CANCELLED, actor_id=ORGANIZER_ID
        )

        with pytest.raises(InvalidTransitionError, match='Cancelled events cannot be restored'):
            await world.restore_event().restore(archive_id=record.id, actor_id=ORGANIZER_ID)

    @pytest.mark.asyncio
    async def test_only_organizer_may_restore(self, world: InMemoryWorld) -> None:
        event = await world.add_event()
        record = await world.archive_event().archive(event_id=event.id, actor_id=ORGANIZER_ID)

        with pytest.raises(ForbiddenError):
            await world.restore_event().restore(
                archive_id=record.id, actor_id=ANOTHER_ORGANIZER_ID
            )

    @pytest.mark.asyncio
    async def test_unknown_record(self, world: InMemoryWorld) -> None:
        with pytest.raises(NotFoundError):
            await world.restore_event().restore(archive_id=uuid7())
