from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed
from uuid_utils import UUID

from src.platform.config.core_setting import settings
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
    EventArchivedDomainEvent,
)
from src.service.ticketing.domain.entity.archive_record_entity import (
    ArchiveLogEntry,
    ArchiveRecord,
)
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.domain.enum.event_status import EventStatus


class _RecordPending(Exception):
    """The winning archiver has flipped the status but not yet written its record."""


class ArchiveEventUseCase:
    """
    Retire an active event into the archive.

    Flow:
    1. Validate event exists (and, for organizer actions, the actor owns it)
    2. Already retired -> return the existing record (safe to call twice)
    3. Ledger transition active -> archived/cancelled; the committed row is the snapshot
    4. Persist the archive record; on failure revert the transition
    5. Audit entry + organizer notification (both best-effort)
    """

    def __init__(
        self,
        *,
        inventory_store: IInventoryStore,
        archive_store: IArchiveStore,
        ledger: InventoryLedger,
        notification_dispatcher: INotificationDispatcher,
        record_wait_attempts: int = settings.ARCHIVE_RECORD_WAIT_ATTEMPTS,
        record_wait_seconds: float = settings.ARCHIVE_RECORD_WAIT_SECONDS,
    ) -> None:
        self.inventory_store = inventory_store
        self.archive_store = archive_store
        self.ledger = ledger
        self.notification_dispatcher = notification_dispatcher
        self.record_wait_attempts = record_wait_attempts
        self.record_wait_seconds = record_wait_seconds
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
    async def archive(
        self,
        *,
        event_id: UUID,
        reason: ArchiveReason = ArchiveReason.MANUAL,
        actor_id: Optional[str] = None,
    ) -> ArchiveRecord:
        with self.tracer.start_as_current_span(
            'use_case.archive_event',
            attributes={'event.id': str(event_id), 'archive.reason': reason.value},
        ):
            try:
                record = await self._archive(event_id=event_id, reason=reason, actor_id=actor_id)
            except CustomBaseError as e:
                metrics.record_archive(operation='archive', result=e.error_code)
                raise
            metrics.record_archive(operation='archive', result='archived')
            return record

    async def _archive(
        self, *, event_id: UUID, reason: ArchiveReason, actor_id: Optional[str]
    ) -> ArchiveRecord:
        if reason == ArchiveReason.RESTORED:
            raise ValueError('restored is not an archive reason')

        event = await self.inventory_store.get_event(event_id=event_id)
        if not event:
            raise NotFoundError('Event not found')
        if reason != ArchiveReason.AUTOMATIC and event.organizer_id != actor_id:
            raise ForbiddenError('Only the organizer can archive this event')

        target = (
            EventStatus.CANCELLED if reason == ArchiveReason.CANCELLED else EventStatus.ARCHIVED
        )
        if event.status == target:
            # The archiver that flipped the status may still be writing its record
            current, existing = await self._await_record(event_id=event_id, target=target)
            if existing:
                Logger.base.info(f'♻️ [ARCHIVE] Event {event_id} already {target.value}')
                return existing
            if current is None or current.status != target:
                raise InvalidTransitionError(
                    f'Event {event_id} changed status while being archived'
                )
            # Retired without a record: capture the current row as-is
            return await self._record(event=current, reason=reason, actor_id=actor_id)

        try:
            snapshot = await self.ledger.transition_lifecycle(
                event_id=event_id, from_status=EventStatus.ACTIVE, to_status=target
            )
        except InvalidTransitionError:
            winner = await self._concurrent_winner(
                event_id=event_id, target=target, reason=reason, actor_id=actor_id
            )
            if winner is None:
                raise
            return winner

        try:
            record = await self.archive_store.create_record(
                record=ArchiveRecord.capture(event=snapshot, reason=reason, actor_id=actor_id)
            )
        except Exception as e:
            Logger.base.error(
                f'❌ [ARCHIVE] Record write failed for {event_id}, reverting to active: {e}'
            )
            await self._revert(event_id=event_id, target=target)
            raise

        await self._after_archive(record=record, actor_id=actor_id)
        return record

    async def _record(
        self, *, event: Event, reason: ArchiveReason, actor_id: Optional[str]
    ) -> ArchiveRecord:
        record = await self.archive_store.create_record(
            record=ArchiveRecord.capture(event=event, reason=reason, actor_id=actor_id)
        )
        await self._after_archive(record=record, actor_id=actor_id)
        return record

    async def _await_record(
        self, *, event_id: UUID, target: EventStatus
    ) -> tuple[Optional[Event], Optional[ArchiveRecord]]:
        """
        Poll for the record of an archiver that has flipped the status but not yet
        written its record. Stops early once the event leaves the target status.
        """
        current: Optional[Event] = None
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.record_wait_attempts),
                wait=wait_fixed(self.record_wait_seconds),
                retry=retry_if_exception_type(_RecordPending),
                reraise=True,
            ):
                with attempt:
                    current = await self.inventory_store.get_event(event_id=event_id)
                    if current is None or current.status != target:
                        return current, None
                    record = await self.archive_store.find_latest_for_event(event_id=event_id)
                    if record is None:
                        raise _RecordPending(str(event_id))
                    return current, record
        except _RecordPending:
            pass
        return current, None

    async def _concurrent_winner(
        self,
        *,
        event_id: UUID,
        target: EventStatus,
        reason: ArchiveReason,
        actor_id: Optional[str],
    ) -> Optional[ArchiveRecord]:
        """
        Resolve a lost transition race.

        Returns the winner's record once it is written, None when the event is not in
        the target status (a real invalid transition, or the winner reverted). When the
        status holds but the record never shows up within the wait budget, the event
        is reported as already archived with an unsaved capture of the current row.
        """
        current, record = await self._await_record(event_id=event_id, target=target)
        if record is not None:
            Logger.base.info(
                f'♻️ [ARCHIVE] Event {event_id} archived concurrently, returning record {record.id}'
            )
            return record
        if current is None or current.status != target:
            return None
        Logger.base.warning(
            f'⏳ [ARCHIVE] Event {event_id} is already {target.value} but its record is not '
            f'visible after {self.record_wait_attempts} attempts, treating as no-op'
        )
        return ArchiveRecord.capture(event=current, reason=reason, actor_id=actor_id)

    async def _revert(self, *, event_id: UUID, target: EventStatus) -> None:
        try:
            await self.ledger.revert_transition(
                event_id=event_id, from_status=target, to_status=EventStatus.ACTIVE
            )
        except Exception as e:
            Logger.base.error(
                f'🚨 [ARCHIVE] Revert failed, event {event_id} is {target.value} '
                f'without an archive record: {e}'
            )

    async def _after_archive(self, *, record: ArchiveRecord, actor_id: Optional[str]) -> None:
        try:
            await self.archive_store.append_log(
                entry=ArchiveLogEntry(
                    event_id=record.event_id,
                    action=record.reason,
                    archive_id=record.id,
                    actor_id=actor_id,
                )
            )
        except Exception as e:
            Logger.base.error(f'❌ [ARCHIVE] Audit entry for {record.event_id} not written: {e}')

        Logger.base.info(
            f'📦 [ARCHIVE] Event {record.event_id} archived ({record.reason.value}), '
            f'record {record.id}'
        )
        archived = EventArchivedDomainEvent.from_record(record=record)
        notify_best_effort(
            self.notification_dispatcher,
            user_id=record.organizer_id,
            template_kind=archived.template_kind,
            payload=archived.to_payload(),
        )
