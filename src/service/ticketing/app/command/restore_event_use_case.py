from datetime import datetime, timezone
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    CustomBaseError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.ticketing.app.interface.i_archive_store import IArchiveStore
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.app.service.inventory_ledger import InventoryLedger
from src.service.ticketing.app.service.notification_guard import notify_best_effort
from src.service.ticketing.domain.domain_event.archive_domain_event import (
    EventRestoredDomainEvent,
)
from src.service.ticketing.domain.entity.archive_record_entity import (
    ArchiveLogEntry,
    ArchiveRecord,
)
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.domain.enum.event_status import EventStatus


class RestoreEventUseCase:
    """
    Bring an archived event back to active.

    The live row is reused when it still exists; a hard-deleted row is rebuilt from
    the snapshot (counters included) before the ledger transition.
    """

    def __init__(
        self,
        *,
        inventory_store: IInventoryStore,
        archive_store: IArchiveStore,
        ledger: InventoryLedger,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.inventory_store = inventory_store
        self.archive_store = archive_store
        self.ledger = ledger
        self.notification_dispatcher = notification_dispatcher
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
            archive_store=archive_store,
            ledger=ledger,
            notification_dispatcher=notification_dispatcher,
        )

    @Logger.io
    async def restore(self, *, archive_id: UUID, actor_id: Optional[str] = None) -> Event:
        with self.tracer.start_as_current_span(
            'use_case.restore_event', attributes={'archive.id': str(archive_id)}
        ):
            try:
                event = await self._restore(archive_id=archive_id, actor_id=actor_id)
            except CustomBaseError as e:
                metrics.record_archive(operation='restore', result=e.error_code)
                raise
            metrics.record_archive(operation='restore', result='restored')
            return event

    async def _restore(self, *, archive_id: UUID, actor_id: Optional[str]) -> Event:
        record = await self.archive_store.get_record(archive_id=archive_id)
        if not record:
            raise NotFoundError('Archive record not found')
        if record.reason == ArchiveReason.CANCELLED:
            raise InvalidTransitionError('Cancelled events cannot be restored')
        if actor_id is not None and record.organizer_id != actor_id:
            raise ForbiddenError('Only the organizer can restore this event')

        live = await self.inventory_store.get_event(event_id=record.event_id)
        if live is None:
            Logger.base.info(f'🧬 [RESTORE] Rebuilding event {record.event_id} from snapshot')
            live = await self.inventory_store.create_event(
                event=attrs.evolve(record.snapshot, status=EventStatus.ARCHIVED)
            )

        if live.status == EventStatus.ACTIVE:
            restored = live
        else:
            restored = await self.ledger.transition_lifecycle(
                event_id=live.id, from_status=EventStatus.ARCHIVED, to_status=EventStatus.ACTIVE
            )

        if not record.is_restored:
            await self._stamp(record=record, event=restored, actor_id=actor_id)
        return restored

    async def _stamp(self, *, record: ArchiveRecord, event: Event, actor_id: Optional[str]) -> None:
        await self.archive_store.mark_restored(
            archive_id=record.id, actor_id=actor_id, restored_at=datetime.now(timezone.utc)
        )
        try:
            await self.archive_store.append_log(
                entry=ArchiveLogEntry(
                    event_id=record.event_id,
                    action=ArchiveReason.RESTORED,
                    archive_id=record.id,
                    actor_id=actor_id,
                )
            )
        except Exception as e:
            Logger.base.error(f'❌ [RESTORE] Audit entry for {record.event_id} not written: {e}')

        Logger.base.info(f'♻️ [RESTORE] Event {event.id} active again (record {record.id})')
        restored = EventRestoredDomainEvent.from_event(
            event=event, archive_id=record.id, restored_by=actor_id
        )
        notify_best_effort(
            self.notification_dispatcher,
            user_id=event.organizer_id,
            template_kind=restored.template_kind,
            payload=restored.to_payload(),
        )
