from datetime import datetime, timezone
from typing import List, Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.archive_event_use_case import ArchiveEventUseCase
from src.service.ticketing.app.dto.archive_result import (
    ArchiveBatchResult,
    ArchiveOutcome,
    ArchiveOutcomeStatus,
)
from src.service.ticketing.app.interface.i_archive_store import IArchiveStore
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.app.service.inventory_ledger import InventoryLedger
from src.service.ticketing.domain.archive_policy import is_eligible_for_archive
from src.service.ticketing.domain.entity.event_entity import Event, ensure_utc
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.domain.enum.event_status import EventStatus


class ArchiveBatchUseCase:
    """
    Archive every active event past its end time + buffer.

    Events are processed in chunks of `batch_size`, each chunk concurrently. A failed
    event is reported and left active; the next run picks it up again while already
    archived events are no longer in the active scan.
    """

    def __init__(
        self,
        *,
        inventory_store: IInventoryStore,
        archive_event: ArchiveEventUseCase,
        batch_size: int = settings.ARCHIVE_BATCH_SIZE,
    ) -> None:
        self.inventory_store = inventory_store
        self.archive_event = archive_event
        self.batch_size = max(1, batch_size)
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        inventory_store: IInventoryStore = Depends(Provide[Container.inventory_store]),
        archive_store: IArchiveStore = Depends(Provide[Container.archive_store]),
        ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            inventory_store=inventory_store,
            archive_event=ArchiveEventUseCase(
                inventory_store=inventory_store,
                archive_store=archive_store,
                ledger=ledger,
                notification_dispatcher=notification_dispatcher,
            ),
        )

    @Logger.io
    async def archive_batch(
        self,
        *,
        buffer_hours: float = settings.ARCHIVE_BUFFER_HOURS,
        organizer_id: Optional[str] = None,
        dry_run: bool = False,
        now: Optional[datetime] = None,
    ) -> ArchiveBatchResult:
        current = ensure_utc(now) if now is not None else datetime.now(timezone.utc)

        with self.tracer.start_as_current_span(
            'use_case.archive_batch',
            attributes={'archive.buffer_hours': buffer_hours, 'archive.dry_run': dry_run},
        ):
            active = await self.inventory_store.list_events(
                status=EventStatus.ACTIVE, organizer_id=organizer_id
            )
            eligible = [e for e in active if is_eligible_for_archive(e, buffer_hours, current)]
            result = ArchiveBatchResult(scanned=len(active), dry_run=dry_run)

            Logger.base.info(
                f'🗃️ [ARCHIVE-BATCH] {len(eligible)}/{len(active)} active events eligible '
                f'(buffer {buffer_hours}h, dry_run={dry_run})'
            )

            if dry_run:
                result.outcomes = [
                    ArchiveOutcome(
                        event_id=e.id, event_name=e.name, status=ArchiveOutcomeStatus.ELIGIBLE
                    )
                    for e in eligible
                ]
                return result

            for start in range(0, len(eligible), self.batch_size):
                chunk = eligible[start : start + self.batch_size]
                outcomes: List[Optional[ArchiveOutcome]] = [None] * len(chunk)
                async with anyio.create_task_group() as tg:
                    for index, event in enumerate(chunk):
                        tg.start_soon(self._archive_one, event, outcomes, index)
                result.outcomes.extend(o for o in outcomes if o is not None)

            Logger.base.info(
                f'🗃️ [ARCHIVE-BATCH] archived={result.archived} failed={result.failed}'
            )
            return result

    async def _archive_one(
        self, event: Event, outcomes: List[Optional[ArchiveOutcome]], index: int
    ) -> None:
        # Must not raise: an exception here would cancel the rest of the chunk
        try:
            record = await self.archive_event.archive(
                event_id=event.id, reason=ArchiveReason.AUTOMATIC, actor_id=None
            )
        except Exception as e:
            Logger.base.warning(f'⚠️ [ARCHIVE-BATCH] Event {event.id} not archived: {e}')
            outcomes[index] = ArchiveOutcome(
                event_id=event.id,
                event_name=event.name,
                status=ArchiveOutcomeStatus.FAILED,
                error=str(e),
            )
            return
        outcomes[index] = ArchiveOutcome(
            event_id=event.id,
            event_name=event.name,
            status=ArchiveOutcomeStatus.ARCHIVED,
            archive_id=record.id,
        )
