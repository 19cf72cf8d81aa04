from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_archive_store import IArchiveStore
from src.service.ticketing.domain.entity.archive_record_entity import (
    ArchiveLogEntry,
    ArchiveRecord,
)
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.driven_adapter.model.archive_model import (
    ArchiveLogModel,
    ArchiveRecordModel,
)


def _pk(value: UUID) -> uuid.UUID:
    return uuid.UUID(str(value))


def _optional_uuid(value: Optional[uuid.UUID]) -> Optional[UUID]:
    return UUID(str(value)) if value is not None else None


class ArchiveStoreImpl(IArchiveStore):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _record_to_entity(db_record: ArchiveRecordModel) -> ArchiveRecord:
        return ArchiveRecord(
            id=UUID(str(db_record.id)),
            event_id=UUID(str(db_record.event_id)),
            organizer_id=db_record.organizer_id,
            snapshot=Event.from_snapshot(db_record.snapshot),
            reason=ArchiveReason(db_record.reason),
            archived_at=db_record.archived_at,
            archived_by=db_record.archived_by,
            restored_at=db_record.restored_at,
            restored_by=db_record.restored_by,
        )

    @staticmethod
    def _log_to_entity(db_log: ArchiveLogModel) -> ArchiveLogEntry:
        return ArchiveLogEntry(
            id=UUID(str(db_log.id)),
            event_id=UUID(str(db_log.event_id)),
            archive_id=_optional_uuid(db_log.archive_id),
            action=ArchiveReason(db_log.action),
            actor_id=db_log.actor_id,
            created_at=db_log.created_at,
        )

    @Logger.io
    async def create_record(self, *, record: ArchiveRecord) -> ArchiveRecord:
        db_record = ArchiveRecordModel(
            id=_pk(record.id),
            event_id=_pk(record.event_id),
            organizer_id=record.organizer_id,
            snapshot=record.snapshot.to_snapshot(),
            reason=record.reason.value,
            archived_by=record.archived_by,
            archived_at=record.archived_at,
            restored_at=record.restored_at,
            restored_by=record.restored_by,
        )
        async with self.session_factory() as session:
            session.add(db_record)
            await session.commit()
            await session.refresh(db_record)
            return self._record_to_entity(db_record)

    @Logger.io
    async def get_record(self, *, archive_id: UUID) -> Optional[ArchiveRecord]:
        async with self.session_factory() as session:
            db_record = await session.get(ArchiveRecordModel, _pk(archive_id))
            return self._record_to_entity(db_record) if db_record else None

    @Logger.io
    async def find_latest_for_event(self, *, event_id: UUID) -> Optional[ArchiveRecord]:
        stmt = (
            select(ArchiveRecordModel)
            .where(
                ArchiveRecordModel.event_id == _pk(event_id),
                ArchiveRecordModel.restored_at.is_(None),
            )
            .order_by(ArchiveRecordModel.archived_at.desc())
            .limit(1)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            db_record = result.scalar_one_or_none()
            return self._record_to_entity(db_record) if db_record else None

    @Logger.io
    async def mark_restored(
        self, *, archive_id: UUID, actor_id: Optional[str], restored_at: datetime
    ) -> Optional[ArchiveRecord]:
        stmt = (
            update(ArchiveRecordModel)
            .where(ArchiveRecordModel.id == _pk(archive_id))
            .values(restored_at=restored_at, restored_by=actor_id)
            .returning(ArchiveRecordModel)
            .execution_options(synchronize_session=False)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            db_record = result.scalar_one_or_none()
            record = self._record_to_entity(db_record) if db_record else None
            await session.commit()
            return record

    @Logger.io
    async def list_records(
        self, *, organizer_id: Optional[str] = None, include_restored: bool = False, limit: int = 50
    ) -> List[ArchiveRecord]:
        stmt = select(ArchiveRecordModel).order_by(ArchiveRecordModel.archived_at.desc()).limit(limit)
        if organizer_id is not None:
            stmt = stmt.where(ArchiveRecordModel.organizer_id == organizer_id)
        if not include_restored:
            stmt = stmt.where(ArchiveRecordModel.restored_at.is_(None))
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._record_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def append_log(self, *, entry: ArchiveLogEntry) -> ArchiveLogEntry:
        db_log = ArchiveLogModel(
            id=_pk(entry.id),
            event_id=_pk(entry.event_id),
            archive_id=_pk(entry.archive_id) if entry.archive_id else None,
            action=entry.action.value,
            actor_id=entry.actor_id,
            created_at=entry.created_at,
        )
        async with self.session_factory() as session:
            session.add(db_log)
            await session.commit()
            return entry

    @Logger.io
    async def list_logs(self, *, event_id: UUID) -> List[ArchiveLogEntry]:
        stmt = (
            select(ArchiveLogModel)
            .where(ArchiveLogModel.event_id == _pk(event_id))
            .order_by(ArchiveLogModel.created_at)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._log_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def delete_logs_before(self, *, cutoff: datetime) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                delete(ArchiveLogModel).where(ArchiveLogModel.created_at < cutoff)
            )
            await session.commit()
            return result.rowcount or 0  # pyright: ignore[reportAttributeAccessIssue]
