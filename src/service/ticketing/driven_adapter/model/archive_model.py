from datetime import datetime
from typing import Any, Optional
import uuid

from sqlalchemy import JSON, DateTime, Index, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class ArchiveRecordModel(Base):
    __tablename__ = 'archive_record'
    __table_args__ = (Index('ix_archive_record_event_archived_at', 'event_id', 'archived_at'),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    # Back-reference only: the live event row may be hard-deleted later
    event_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    organizer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    snapshot: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), 'postgresql'), nullable=False
    )
    reason: Mapped[str] = mapped_column(String(20), nullable=False)
    archived_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    archived_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    restored_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    restored_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class ArchiveLogModel(Base):
    __tablename__ = 'archive_log'

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    event_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    archive_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    actor_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
