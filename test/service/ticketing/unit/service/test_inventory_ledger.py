"""
Unit tests for InventoryLedger

Runs against the in-memory inventory store (same conditional-write contract as the
PostgreSQL store) and against AsyncMock stores for the retry policy.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import anyio
import pytest
from uuid_utils import uuid7

from src.platform.exception.exceptions import (
    DomainError,
    InsufficientCapacityError,
    InvalidTransitionError,
    NotActiveError,
    NotFoundError,
    StorageConflictError,
)
from src.service.ticketing.app.service.inventory_ledger import InventoryLedger
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_inventory_store_impl import (
    InMemoryInventoryStoreImpl,
)
from test.service.ticketing.fixtures import build_event


@pytest.fixture
def inventory_store() -> InMemoryInventoryStoreImpl:
    return InMemoryInventoryStoreImpl()


@pytest.fixture
def ledger(inventory_store: InMemoryInventoryStoreImpl) -> InventoryLedger:
    return InventoryLedger(
        inventory_store=inventory_store, max_attempts=3, retry_wait_min=0, retry_wait_max=0
    )


@pytest.mark.unit
class TestReserve:
    @pytest.mark.asyncio
    async def test_reserve_moves_tickets(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        # Arrange
        event = await inventory_store.create_event(event=build_event(total_tickets=100))

        # Act
        reservation = await ledger.reserve(event_id=event.id, quantity=30)

        # Assert
        assert reservation.sold_tickets == 30
        assert reservation.available_tickets == 70
        stored = await inventory_store.get_event(event_id=event.id)
        assert stored is not None and stored.ledger_is_consistent

    @pytest.mark.asyncio
    async def test_reserve_beyond_capacity_reports_remaining(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        """
        GIVEN: 100 tickets, 30 sold
        WHEN: Someone asks for 80
        THEN: InsufficientCapacityError with remaining=70 and counters untouched
        """
        event = await inventory_store.create_event(event=build_event(total_tickets=100))
        await ledger.reserve(event_id=event.id, quantity=30)

        with pytest.raises(InsufficientCapacityError) as exc_info:
            await ledger.reserve(event_id=event.id, quantity=80)

        assert exc_info.value.remaining == 70
        assert exc_info.value.message == 'Only 70 spots remaining'
        stored = await inventory_store.get_event(event_id=event.id)
        assert stored is not None
        assert (stored.sold_tickets, stored.available_tickets) == (30, 70)

    @pytest.mark.asyncio
    async def test_sold_out_message(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        event = await inventory_store.create_event(event=build_event(total_tickets=1))
        await ledger.reserve(event_id=event.id, quantity=1)

        with pytest.raises(InsufficientCapacityError, match='Event is full'):
            await ledger.reserve(event_id=event.id, quantity=1)

    @pytest.mark.asyncio
    async def test_reserve_on_inactive_event(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        event = await inventory_store.create_event(
            event=build_event(status=EventStatus.ARCHIVED)
        )

        with pytest.raises(NotActiveError):
            await ledger.reserve(event_id=event.id, quantity=1)

    @pytest.mark.asyncio
    async def test_reserve_on_missing_event(self, ledger: InventoryLedger) -> None:
        with pytest.raises(NotFoundError):
            await ledger.reserve(event_id=uuid7(), quantity=1)

    @pytest.mark.asyncio
    async def test_reserve_rejects_non_positive_quantity(self, ledger: InventoryLedger) -> None:
        with pytest.raises(DomainError):
            await ledger.reserve(event_id=uuid7(), quantity=0)

    @pytest.mark.asyncio
    async def test_concurrent_reserves_never_oversell(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        """
        GIVEN: 5 tickets left
        WHEN: 10 callers reserve 1 ticket concurrently
        THEN: Exactly 5 succeed, the rest get InsufficientCapacityError, sold == total
        """
        event = await inventory_store.create_event(event=build_event(total_tickets=5))
        successes: list[int] = []
        failures: list[Exception] = []

        async def _reserve() -> None:
            try:
                await ledger.reserve(event_id=event.id, quantity=1)
                successes.append(1)
            except InsufficientCapacityError as e:
                failures.append(e)

        async with anyio.create_task_group() as tg:
            for _ in range(10):
                tg.start_soon(_reserve)

        assert len(successes) == 5
        assert len(failures) == 5
        stored = await inventory_store.get_event(event_id=event.id)
        assert stored is not None
        assert (stored.sold_tickets, stored.available_tickets) == (5, 0)


@pytest.mark.unit
class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_storage_conflict_is_retried(self) -> None:
        # Arrange
        event = build_event(total_tickets=10).with_reservation(
            quantity=1, at=datetime.now(timezone.utc)
        )
        store = AsyncMock()
        store.reserve_if_available = AsyncMock(side_effect=[StorageConflictError(), event])
        ledger = InventoryLedger(
            inventory_store=store, max_attempts=3, retry_wait_min=0, retry_wait_max=0
        )

        # Act
        reservation = await ledger.reserve(event_id=event.id, quantity=1)

        # Assert
        assert reservation.sold_tickets == 1
        assert store.reserve_if_available.await_count == 2

    @pytest.mark.asyncio
    async def test_storage_conflict_gives_up_after_max_attempts(self) -> None:
        store = AsyncMock()
        store.reserve_if_available = AsyncMock(side_effect=StorageConflictError())
        ledger = InventoryLedger(
            inventory_store=store, max_attempts=3, retry_wait_min=0, retry_wait_max=0
        )

        with pytest.raises(StorageConflictError):
            await ledger.reserve(event_id=uuid7(), quantity=1)

        assert store.reserve_if_available.await_count == 3

    @pytest.mark.asyncio
    async def test_capacity_errors_are_not_retried(self) -> None:
        full = build_event(total_tickets=0)
        store = AsyncMock()
        store.reserve_if_available = AsyncMock(return_value=None)
        store.get_event = AsyncMock(return_value=full)
        ledger = InventoryLedger(
            inventory_store=store, max_attempts=3, retry_wait_min=0, retry_wait_max=0
        )

        with pytest.raises(InsufficientCapacityError):
            await ledger.reserve(event_id=full.id, quantity=1)

        assert store.reserve_if_available.await_count == 1


@pytest.mark.unit
class TestRelease:
    @pytest.mark.asyncio
    async def test_release_returns_tickets(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        event = await inventory_store.create_event(event=build_event(total_tickets=10))
        await ledger.reserve(event_id=event.id, quantity=4)

        released = await ledger.release(event_id=event.id, quantity=4)

        assert released == 4
        stored = await inventory_store.get_event(event_id=event.id)
        assert stored is not None
        assert (stored.sold_tickets, stored.available_tickets) == (0, 10)

    @pytest.mark.asyncio
    async def test_double_release_is_clamped(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        """
        GIVEN: 2 tickets sold
        WHEN: 3 tickets are released
        THEN: Only 2 go back, sold never goes negative
        """
        event = await inventory_store.create_event(event=build_event(total_tickets=10))
        await ledger.reserve(event_id=event.id, quantity=2)

        released = await ledger.release(event_id=event.id, quantity=3)

        assert released == 2
        stored = await inventory_store.get_event(event_id=event.id)
        assert stored is not None
        assert (stored.sold_tickets, stored.available_tickets) == (0, 10)
        assert stored.ledger_is_consistent

    @pytest.mark.asyncio
    async def test_release_on_archived_event_still_applies(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        event = await inventory_store.create_event(event=build_event(total_tickets=10))
        await ledger.reserve(event_id=event.id, quantity=2)
        await ledger.transition_lifecycle(
            event_id=event.id, from_status=EventStatus.ACTIVE, to_status=EventStatus.ARCHIVED
        )

        assert await ledger.release(event_id=event.id, quantity=2) == 2

    @pytest.mark.asyncio
    async def test_release_on_missing_event(self, ledger: InventoryLedger) -> None:
        with pytest.raises(NotFoundError):
            await ledger.release(event_id=uuid7(), quantity=1)


@pytest.mark.unit
class TestTransitionLifecycle:
    @pytest.mark.asyncio
    async def test_returns_committed_row(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        event = await inventory_store.create_event(event=build_event(total_tickets=10))
        await ledger.reserve(event_id=event.id, quantity=3)

        archived = await ledger.transition_lifecycle(
            event_id=event.id, from_status=EventStatus.ACTIVE, to_status=EventStatus.ARCHIVED
        )

        assert archived.status == EventStatus.ARCHIVED
        assert archived.sold_tickets == 3

    @pytest.mark.asyncio
    async def test_disallowed_transition(self, ledger: InventoryLedger) -> None:
        with pytest.raises(InvalidTransitionError):
            await ledger.transition_lifecycle(
                event_id=uuid7(),
                from_status=EventStatus.CANCELLED,
                to_status=EventStatus.ACTIVE,
            )

    @pytest.mark.asyncio
    async def test_stale_from_status(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        event = await inventory_store.create_event(
            event=build_event(status=EventStatus.DRAFT)
        )

        with pytest.raises(InvalidTransitionError, match='expected active'):
            await ledger.transition_lifecycle(
                event_id=event.id, from_status=EventStatus.ACTIVE, to_status=EventStatus.ARCHIVED
            )

    @pytest.mark.asyncio
    async def test_only_one_concurrent_archive_wins(
        self, ledger: InventoryLedger, inventory_store: InMemoryInventoryStoreImpl
    ) -> None:
        event = await inventory_store.create_event(event=build_event())
        outcomes: list[str] = []

        async def _archive() -> None:
            try:
                await ledger.transition_lifecycle(
                    event_id=event.id,
                    from_status=EventStatus.ACTIVE,
                    to_status=EventStatus.ARCHIVED,
                )
                outcomes.append('won')
            except InvalidTransitionError:
                outcomes.append('lost')

        async with anyio.create_task_group() as tg:
            for _ in range(5):
                tg.start_soon(_archive)

        assert sorted(outcomes) == ['lost', 'lost', 'lost', 'lost', 'won']
