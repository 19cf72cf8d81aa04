from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from src.platform.config.core_setting import settings
from src.platform.types import UtilsUUID7
from src.service.ticketing.app.dto.archive_result import (
    ArchiveBatchResult,
    ArchiveOutcome,
    ArchiveStats,
)
from src.service.ticketing.domain.entity.archive_record_entity import ArchiveRecord


class ArchiveRecordResponse(BaseModel):
    id: UtilsUUID7
    event_id: UtilsUUID7
    organizer_id: str
    event_name: str
    reason: str
    archived_at: datetime
    archived_by: Optional[str]
    restored_at: Optional[datetime]
    snapshot: dict[str, Any]

    @classmethod
    def from_entity(cls, record: ArchiveRecord) -> 'ArchiveRecordResponse':
        return cls(
            id=record.id,
            event_id=record.event_id,
            organizer_id=record.organizer_id,
            event_name=record.snapshot.name,
            reason=record.reason.value,
            archived_at=record.archived_at,
            archived_by=record.archived_by,
            restored_at=record.restored_at,
            snapshot=record.snapshot.to_snapshot(),
        )


class ArchiveBatchRequest(BaseModel):
    buffer_hours: float = Field(default=settings.ARCHIVE_BUFFER_HOURS, ge=0)
    organizer_id: Optional[str] = None
    dry_run: bool = False


class ArchiveOutcomeResponse(BaseModel):
    event_id: UtilsUUID7
    event_name: str
    status: str
    archive_id: Optional[UtilsUUID7] = None
    error: Optional[str] = None

    @classmethod
    def from_dto(cls, outcome: ArchiveOutcome) -> 'ArchiveOutcomeResponse':
        return cls(
            event_id=outcome.event_id,
            event_name=outcome.event_name,
            status=outcome.status.value,
            archive_id=outcome.archive_id,
            error=outcome.error,
        )


class ArchiveBatchResponse(BaseModel):
    scanned: int
    eligible: int
    archived: int
    failed: int
    dry_run: bool
    outcomes: List[ArchiveOutcomeResponse]

    @classmethod
    def from_dto(cls, result: ArchiveBatchResult) -> 'ArchiveBatchResponse':
        return cls(
            scanned=result.scanned,
            eligible=result.eligible,
            archived=result.archived,
            failed=result.failed,
            dry_run=result.dry_run,
            outcomes=[ArchiveOutcomeResponse.from_dto(o) for o in result.outcomes],
        )


class ArchiveStatsResponse(BaseModel):
    active: int
    archived: int
    cancelled: int
    draft: int
    total: int
    archive_rate: float

    @classmethod
    def from_dto(cls, stats: ArchiveStats) -> 'ArchiveStatsResponse':
        return cls(
            active=stats.active,
            archived=stats.archived,
            cancelled=stats.cancelled,
            draft=stats.draft,
            total=stats.total,
            archive_rate=stats.archive_rate,
        )


class LogCleanupRequest(BaseModel):
    days_to_keep: int = Field(default=settings.ARCHIVE_LOG_RETENTION_DAYS, ge=0)


class LogCleanupResponse(BaseModel):
    deleted: int
