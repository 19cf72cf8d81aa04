"""
PostgreSQL Inventory Store

Counters and status only change through single UPDATE ... WHERE <guard> RETURNING
statements, so concurrent writers are serialized by the row lock PostgreSQL takes
for the update and the guard is re-checked against the committed row. No
read-check-write happens in application code.
"""

from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional
import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.database.orm_db_setting import storage_conflict_guard
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.driven_adapter.model.event_model import EventModel


def _pk(event_id: UUID) -> uuid.UUID:
    return uuid.UUID(str(event_id))


class InventoryStoreImpl(IInventoryStore):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_event: EventModel) -> Event:
        # SQLAlchemy returns stdlib uuid.UUID, the domain uses uuid_utils.UUID
        return Event(
            id=UUID(str(db_event.id)),
            organizer_id=db_event.organizer_id,
            name=db_event.name,
            description=db_event.description,
            location=db_event.location,
            starts_at=db_event.starts_at,
            ends_at=db_event.ends_at,
            total_tickets=db_event.total_tickets,
            sold_tickets=db_event.sold_tickets,
            available_tickets=db_event.available_tickets,
            status=EventStatus(db_event.status),
            created_at=db_event.created_at,
            updated_at=db_event.updated_at,
        )

    async def _execute_returning(self, stmt, *, operation: str) -> Optional[Event]:
        with storage_conflict_guard(operation):
            async with self.session_factory() as session:
                result = await session.execute(
                    stmt.returning(EventModel).execution_options(synchronize_session=False)
                )
                db_event = result.scalar_one_or_none()
                event = self._to_entity(db_event) if db_event is not None else None
                await session.commit()
                return event

    @Logger.io
    async def create_event(self, *, event: Event) -> Event:
        db_event = EventModel(
            id=_pk(event.id),
            organizer_id=event.organizer_id,
            name=event.name,
            description=event.description,
            location=event.location,
            starts_at=event.starts_at,
            ends_at=event.ends_at,
            total_tickets=event.total_tickets,
            sold_tickets=event.sold_tickets,
            available_tickets=event.available_tickets,
            status=event.status.value,
        )
        if event.created_at is not None:
            db_event.created_at = event.created_at
        with storage_conflict_guard('create_event'):
            async with self.session_factory() as session:
                session.add(db_event)
                try:
                    await session.commit()
                except IntegrityError as e:
                    await session.rollback()
                    raise ConflictError(f'Event {event.id} already exists') from e
                await session.refresh(db_event)
                return self._to_entity(db_event)

    @Logger.io
    async def get_event(self, *, event_id: UUID) -> Optional[Event]:
        async with self.session_factory() as session:
            db_event = await session.get(EventModel, _pk(event_id))
            return self._to_entity(db_event) if db_event else None

    @Logger.io
    async def list_events(
        self,
        *,
        status: Optional[EventStatus] = None,
        organizer_id: Optional[str] = None,
    ) -> List[Event]:
        stmt = select(EventModel).order_by(EventModel.starts_at, EventModel.id)
        if status is not None:
            stmt = stmt.where(EventModel.status == status.value)
        if organizer_id is not None:
            stmt = stmt.where(EventModel.organizer_id == organizer_id)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def count_by_status(
        self, *, organizer_id: Optional[str] = None
    ) -> dict[EventStatus, int]:
        stmt = select(EventModel.status, func.count()).group_by(EventModel.status)
        if organizer_id is not None:
            stmt = stmt.where(EventModel.organizer_id == organizer_id)
        counts = {status: 0 for status in EventStatus}
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            for status, count in result.all():
                counts[EventStatus(status)] = count
        return counts

    @Logger.io
    async def update_details(
        self,
        *,
        event_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
        starts_at: Optional[datetime] = None,
        ends_at: Optional[datetime] = None,
    ) -> Optional[Event]:
        changes = {
            key: value
            for key, value in {
                'name': name,
                'description': description,
                'location': location,
                'starts_at': starts_at,
                'ends_at': ends_at,
            }.items()
            if value is not None
        }
        if not changes:
            return await self.get_event(event_id=event_id)
        stmt = (
            update(EventModel)
            .where(EventModel.id == _pk(event_id))
            .values(**changes, updated_at=func.now())
        )
        return await self._execute_returning(stmt, operation='update_details')

    @Logger.io
    async def resize_capacity_if_unsold(
        self, *, event_id: UUID, total_tickets: int
    ) -> Optional[Event]:
        stmt = (
            update(EventModel)
            .where(EventModel.id == _pk(event_id), EventModel.sold_tickets == 0)
            .values(
                total_tickets=total_tickets,
                available_tickets=total_tickets,
                updated_at=func.now(),
            )
        )
        return await self._execute_returning(stmt, operation='resize_capacity')

    @Logger.io
    async def delete_event(self, *, event_id: UUID) -> bool:
        with storage_conflict_guard('delete_event'):
            async with self.session_factory() as session:
                result = await session.execute(
                    delete(EventModel).where(EventModel.id == _pk(event_id))
                )
                await session.commit()
                return bool(result.rowcount)  # pyright: ignore[reportAttributeAccessIssue]

    @Logger.io
    async def reserve_if_available(self, *, event_id: UUID, quantity: int) -> Optional[Event]:
        stmt = (
            update(EventModel)
            .where(
                EventModel.id == _pk(event_id),
                EventModel.status == EventStatus.ACTIVE.value,
                EventModel.available_tickets >= quantity,
            )
            .values(
                sold_tickets=EventModel.sold_tickets + quantity,
                available_tickets=EventModel.available_tickets - quantity,
                updated_at=func.now(),
            )
        )
        return await self._execute_returning(stmt, operation='reserve')

    @Logger.io
    async def release(self, *, event_id: UUID, quantity: int) -> Optional[tuple[Event, int]]:
        stmt = (
            update(EventModel)
            .where(EventModel.id == _pk(event_id), EventModel.sold_tickets >= quantity)
            .values(
                sold_tickets=EventModel.sold_tickets - quantity,
                available_tickets=EventModel.available_tickets + quantity,
                updated_at=func.now(),
            )
        )
        event = await self._execute_returning(stmt, operation='release')
        if event is not None:
            return event, quantity
        return await self._release_clamped(event_id=event_id, quantity=quantity)

    async def _release_clamped(
        self, *, event_id: UUID, quantity: int
    ) -> Optional[tuple[Event, int]]:
        # Rare path (double release or missing row): lock the row to learn how much was sold
        with storage_conflict_guard('release_clamped'):
            async with self.session_factory() as session:
                db_event = await session.get(EventModel, _pk(event_id), with_for_update=True)
                if db_event is None:
                    await session.rollback()
                    return None
                released = min(quantity, db_event.sold_tickets)
                db_event.sold_tickets -= released
                db_event.available_tickets += released
                await session.commit()
                await session.refresh(db_event)
                return self._to_entity(db_event), released

    @Logger.io
    async def compare_and_set_status(
        self, *, event_id: UUID, from_status: EventStatus, to_status: EventStatus
    ) -> Optional[Event]:
        stmt = (
            update(EventModel)
            .where(EventModel.id == _pk(event_id), EventModel.status == from_status.value)
            .values(status=to_status.value, updated_at=func.now())
        )
        return await self._execute_returning(stmt, operation='transition')
