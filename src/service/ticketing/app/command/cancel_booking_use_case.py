from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidTransitionError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.ticketing.app.interface.i_booking_store import IBookingStore
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.app.interface.i_reconciliation_store import IReconciliationStore
from src.service.ticketing.app.service.inventory_ledger import InventoryLedger
from src.service.ticketing.app.service.notification_guard import notify_best_effort
from src.service.ticketing.app.service.reconciliation_recorder import flag_for_reconciliation
from src.service.ticketing.domain.domain_event.booking_domain_event import (
    BookingCancelledDomainEvent,
)
from src.service.ticketing.domain.entity.booking_entity import Booking


class CancelBookingUseCase:
    """
    Cancel a confirmed booking and hand its tickets back to the ledger.

    Flow:
    1. Validate booking exists, belongs to the requester and is still confirmed
    2. Conditional confirmed -> cancelled flip (a concurrent cancel loses here)
    3. Release the quantity; a failed release leaves the booking cancelled and
       flags the event for reconciliation
    4. Fire-and-forget cancellation notification
    """

    def __init__(
        self,
        *,
        booking_store: IBookingStore,
        ledger: InventoryLedger,
        reconciliation_store: IReconciliationStore,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.booking_store = booking_store
        self.ledger = ledger
        self.reconciliation_store = reconciliation_store
        self.notification_dispatcher = notification_dispatcher
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_store: IBookingStore = Depends(Provide[Container.booking_store]),
        ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
        reconciliation_store: IReconciliationStore = Depends(
            Provide[Container.reconciliation_store]
        ),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            booking_store=booking_store,
            ledger=ledger,
            reconciliation_store=reconciliation_store,
            notification_dispatcher=notification_dispatcher,
        )

    @Logger.io
    async def cancel_booking(
        self, *, booking_id: UUID, requester_id: Optional[str] = None
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.cancel_booking', attributes={'booking.id': str(booking_id)}
        ):
            booking = await self.booking_store.get_by_id(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')

            booking.check_holder(requester_id, action='cancel')

            # Raises InvalidTransitionError when already cancelled
            booking.cancel()

            cancelled = await self.booking_store.mark_cancelled(booking_id=booking_id)
            if cancelled is None:
                raise InvalidTransitionError('Booking already cancelled')

            try:
                await self.ledger.release(event_id=cancelled.event_id, quantity=cancelled.quantity)
            except Exception as e:
                Logger.base.error(
                    f'❌ [CANCEL-BOOKING] Release failed for {cancelled.reference}, '
                    f'booking stays cancelled: {e}'
                )
                await flag_for_reconciliation(
                    self.reconciliation_store,
                    booking=cancelled,
                    reason='release_failed',
                    cause=e,
                )

            metrics.record_booking(kind=cancelled.kind.value, result='cancelled')
            Logger.base.info(f'🚫 [CANCEL-BOOKING] {cancelled.reference} cancelled')

            event = BookingCancelledDomainEvent.from_booking(booking=cancelled)
            notify_best_effort(
                self.notification_dispatcher,
                user_id=cancelled.user_id,
                template_kind=event.template_kind,
                payload=event.to_payload(),
            )
            return cancelled
