from typing import List, Optional

from fastapi import APIRouter, Depends
from opentelemetry import trace

from src.platform.constant.route_constant import (
    ARCHIVE_BATCH,
    ARCHIVE_EVENT,
    ARCHIVE_LIST,
    ARCHIVE_LOG_CLEANUP,
    ARCHIVE_RESTORE,
    ARCHIVE_STATS,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.ticketing.app.command.archive_batch_use_case import ArchiveBatchUseCase
from src.service.ticketing.app.command.archive_event_use_case import ArchiveEventUseCase
from src.service.ticketing.app.command.cleanup_archive_logs_use_case import (
    CleanupArchiveLogsUseCase,
)
from src.service.ticketing.app.command.restore_event_use_case import RestoreEventUseCase
from src.service.ticketing.app.query.get_archive_stats_use_case import GetArchiveStatsUseCase
from src.service.ticketing.app.query.list_archived_events_use_case import (
    ListArchivedEventsUseCase,
)
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.driving_adapter.http_controller.actor import require_actor
from src.service.ticketing.driving_adapter.http_controller.schema.archive_schema import (
    ArchiveBatchRequest,
    ArchiveBatchResponse,
    ArchiveRecordResponse,
    ArchiveStatsResponse,
    LogCleanupRequest,
    LogCleanupResponse,
)
from src.service.ticketing.driving_adapter.http_controller.schema.event_schema import (
    EventResponse,
)


router = APIRouter(tags=['archive'])
tracer = trace.get_tracer(__name__)


@router.get(ARCHIVE_LIST)
@Logger.io
async def list_archived_events(
    organizer_id: Optional[str] = None,
    use_case: ListArchivedEventsUseCase = Depends(ListArchivedEventsUseCase.depends),
) -> List[ArchiveRecordResponse]:
    records = await use_case.list_archived(organizer_id=organizer_id)
    return [ArchiveRecordResponse.from_entity(r) for r in records]


@router.get(ARCHIVE_STATS)
@Logger.io
async def get_archive_stats(
    organizer_id: Optional[str] = None,
    use_case: GetArchiveStatsUseCase = Depends(GetArchiveStatsUseCase.depends),
) -> ArchiveStatsResponse:
    stats = await use_case.get_stats(organizer_id=organizer_id)
    return ArchiveStatsResponse.from_dto(stats)


@router.post(ARCHIVE_EVENT)
@Logger.io
async def archive_event(
    event_id: UtilsUUID7,
    actor_id: str = Depends(require_actor),
    use_case: ArchiveEventUseCase = Depends(ArchiveEventUseCase.depends),
) -> ArchiveRecordResponse:
    record = await use_case.archive(
        event_id=event_id, reason=ArchiveReason.MANUAL, actor_id=actor_id
    )
    return ArchiveRecordResponse.from_entity(record)


@router.post(ARCHIVE_BATCH)
@Logger.io
async def archive_batch(
    request: ArchiveBatchRequest,
    use_case: ArchiveBatchUseCase = Depends(ArchiveBatchUseCase.depends),
) -> ArchiveBatchResponse:
    with tracer.start_as_current_span('controller.archive_batch') as span:
        span.set_attribute('archive.dry_run', request.dry_run)
        result = await use_case.archive_batch(
            buffer_hours=request.buffer_hours,
            organizer_id=request.organizer_id,
            dry_run=request.dry_run,
        )
        span.set_attribute('archive.archived', result.archived)
        return ArchiveBatchResponse.from_dto(result)


@router.post(ARCHIVE_RESTORE)
@Logger.io
async def restore_event(
    archive_id: UtilsUUID7,
    actor_id: str = Depends(require_actor),
    use_case: RestoreEventUseCase = Depends(RestoreEventUseCase.depends),
) -> EventResponse:
    event = await use_case.restore(archive_id=archive_id, actor_id=actor_id)
    return EventResponse.from_entity(event)


@router.post(ARCHIVE_LOG_CLEANUP)
@Logger.io
async def cleanup_archive_logs(
    request: LogCleanupRequest,
    use_case: CleanupArchiveLogsUseCase = Depends(CleanupArchiveLogsUseCase.depends),
) -> LogCleanupResponse:
    deleted = await use_case.cleanup(days_to_keep=request.days_to_keep)
    return LogCleanupResponse(deleted=deleted)
