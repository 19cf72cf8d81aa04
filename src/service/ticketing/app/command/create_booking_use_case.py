from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    CustomBaseError,
    DomainError,
    DuplicateRegistrationError,
    ReferenceCollisionError,
    StorageConflictError,
)
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
    BookingConfirmedDomainEvent,
)
from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.enum.booking_status import BookingKind
from src.service.ticketing.domain.value_object.attendee_info import AttendeeInfo


class CreateBookingUseCase:
    """
    Create booking use case - reserve first, then record

    Flow:
    1. Build the Booking (quantity / anonymous email validation)
    2. Anonymous RSVP: reject a second confirmed registration for the same email
    3. Reserve capacity through the Inventory Ledger (the only oversell guard)
    4. Persist the booking, regenerating the reference on collision
    5. Fire-and-forget confirmation notification

    A persist failure after a successful reserve is compensated with a release, so
    the ledger never keeps tickets for a booking that does not exist.
    """

    def __init__(
        self,
        *,
        booking_store: IBookingStore,
        ledger: InventoryLedger,
        reconciliation_store: IReconciliationStore,
        notification_dispatcher: INotificationDispatcher,
        reference_max_attempts: int = settings.REFERENCE_MAX_ATTEMPTS,
    ) -> None:
        self.booking_store = booking_store
        self.ledger = ledger
        self.reconciliation_store = reconciliation_store
        self.notification_dispatcher = notification_dispatcher
        self.reference_max_attempts = reference_max_attempts
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
    async def create_booking(
        self,
        *,
        event_id: UUID,
        attendee: AttendeeInfo,
        quantity: int,
        kind: BookingKind = BookingKind.PURCHASE,
        source: str = 'app',
    ) -> Booking:
        """
        Raises:
            DomainError: invalid quantity or missing email for an anonymous attendee
            DuplicateRegistrationError: email already holds a confirmed RSVP for the event
            NotFoundError / NotActiveError / InsufficientCapacityError: from the ledger
            StorageConflictError: storage contention outlasted the retries
        """
        prefix = (
            settings.RSVP_REFERENCE_PREFIX
            if kind == BookingKind.RSVP
            else settings.BOOKING_REFERENCE_PREFIX
        )
        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'event.id': str(event_id),
                'booking.kind': kind.value,
                'booking.quantity': quantity,
            },
        ):
            booking = Booking.create(
                event_id=event_id,
                attendee=attendee,
                quantity=quantity,
                kind=kind,
                reference_prefix=prefix,
                source=source,
            )

            try:
                if booking.is_anonymous and booking.attendee_email:
                    existing = await self.booking_store.find_confirmed_by_email(
                        event_id=event_id, email=booking.attendee_email
                    )
                    if existing:
                        raise DuplicateRegistrationError()

                await self.ledger.reserve(event_id=event_id, quantity=quantity)
            except CustomBaseError as e:
                metrics.record_booking(kind=kind.value, result=e.error_code)
                raise

            try:
                saved = await self._persist(booking)
            except Exception as e:
                await self._compensate(booking, cause=e)
                if isinstance(e, CustomBaseError):
                    metrics.record_booking(kind=kind.value, result=e.error_code)
                raise

            metrics.record_booking(kind=kind.value, result='confirmed')
            Logger.base.info(
                f'✅ [CREATE-BOOKING] {saved.reference} confirmed: '
                f'{quantity} for event {event_id} ({kind.value})'
            )

            confirmed = BookingConfirmedDomainEvent.from_booking(booking=saved)
            notify_best_effort(
                self.notification_dispatcher,
                user_id=saved.user_id,
                template_kind=confirmed.template_kind,
                payload=confirmed.to_payload(),
            )
            return saved

    async def _persist(self, booking: Booking) -> Booking:
        last_collision: Optional[ReferenceCollisionError] = None
        for attempt in range(1, self.reference_max_attempts + 1):
            try:
                return await self.booking_store.create(booking=booking)
            except ReferenceCollisionError as e:
                last_collision = e
                Logger.base.warning(
                    f'🔁 [CREATE-BOOKING] Reference {booking.reference} taken, '
                    f'regenerating ({attempt}/{self.reference_max_attempts})'
                )
                booking = booking.with_new_reference()
        raise StorageConflictError('Could not allocate a unique booking reference') from (
            last_collision
        )

    async def _compensate(self, booking: Booking, *, cause: Exception) -> None:
        Logger.base.warning(
            f'⏪ [CREATE-BOOKING] Persist failed for event {booking.event_id} ({cause}), '
            f'releasing {booking.quantity}'
        )
        try:
            await self.ledger.release(event_id=booking.event_id, quantity=booking.quantity)
        except Exception as release_error:
            await flag_for_reconciliation(
                self.reconciliation_store,
                booking=booking,
                reason='booking_compensation_failed',
                cause=release_error,
            )


class CreateRsvpUseCase:
    """Web RSVP without an account: name and email identify the attendee."""

    def __init__(self, *, create_booking: CreateBookingUseCase) -> None:
        self.create_booking_use_case = create_booking

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
            create_booking=CreateBookingUseCase(
                booking_store=booking_store,
                ledger=ledger,
                reconciliation_store=reconciliation_store,
                notification_dispatcher=notification_dispatcher,
            )
        )

    @Logger.io
    async def create_rsvp(
        self,
        *,
        event_id: UUID,
        name: str,
        email: str,
        phone: Optional[str] = None,
        quantity: int = 1,
    ) -> Booking:
        if not name or not name.strip():
            raise DomainError('name is required')
        if not email or not email.strip():
            raise DomainError('email is required')

        return await self.create_booking_use_case.create_booking(
            event_id=event_id,
            attendee=AttendeeInfo(email=email, name=name, phone=phone),
            quantity=quantity,
            kind=BookingKind.RSVP,
            source='web',
        )
