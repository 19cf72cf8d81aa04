"""
Inventory Ledger

Sole authority over an event's capacity counters and lifecycle status. Every change
goes through one conditional write on the inventory store; this class only
classifies misses into business errors and retries transient storage conflicts.

Retry policy:
- StorageConflictError: retried with exponential backoff, bounded, then re-raised
- NotFound / NotActive / InsufficientCapacity / InvalidTransition: never retried,
  a repeated capacity check without re-validation could oversell
"""

from datetime import datetime, timezone
import time
from typing import Awaitable, Callable, TypeVar

from opentelemetry import trace
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import (
    CustomBaseError,
    DomainError,
    InsufficientCapacityError,
    InvalidTransitionError,
    NotActiveError,
    NotFoundError,
    StorageConflictError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus, is_valid_transition
from src.service.ticketing.domain.value_object.reservation import Reservation


_T = TypeVar('_T')


class InventoryLedger:
    def __init__(
        self,
        *,
        inventory_store: IInventoryStore,
        max_attempts: int = settings.LEDGER_MAX_ATTEMPTS,
        retry_wait_min: float = settings.LEDGER_RETRY_WAIT_MIN,
        retry_wait_max: float = settings.LEDGER_RETRY_WAIT_MAX,
    ) -> None:
        self.inventory_store = inventory_store
        self.max_attempts = max_attempts
        self.retry_wait_min = retry_wait_min
        self.retry_wait_max = retry_wait_max
        self.tracer = trace.get_tracer(__name__)

    async def _with_retry(self, operation: str, attempt_fn: Callable[[], Awaitable[_T]]) -> _T:
        def _before_sleep(retry_state: RetryCallState) -> None:
            metrics.ledger_retries.labels(operation=operation).inc()
            Logger.base.warning(
                f'🔁 [LEDGER] {operation} hit a storage conflict, '
                f'attempt {retry_state.attempt_number}/{self.max_attempts}'
            )

        started = time.perf_counter()
        result_label = 'success'
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(
                    multiplier=self.retry_wait_min, min=self.retry_wait_min, max=self.retry_wait_max
                ),
                retry=retry_if_exception_type(StorageConflictError),
                before_sleep=_before_sleep,
                reraise=True,
            ):
                with attempt:
                    result = await attempt_fn()
            return result  # pyright: ignore[reportPossiblyUnboundVariable]
        except CustomBaseError as e:
            result_label = e.error_code
            raise
        except Exception:
            result_label = 'error'
            raise
        finally:
            metrics.record_ledger_operation(
                operation=operation,
                result=result_label,
                duration=time.perf_counter() - started,
            )

    @Logger.io
    async def reserve(self, *, event_id: UUID, quantity: int) -> Reservation:
        """
        Atomically move `quantity` tickets from available to sold.

        Raises:
            DomainError: quantity < 1
            NotFoundError: event does not exist
            NotActiveError: event is not accepting bookings
            InsufficientCapacityError: not enough tickets left (carries `remaining`)
            StorageConflictError: contention persisted past the retry bound
        """
        if quantity < 1:
            raise DomainError('quantity must be at least 1')

        with self.tracer.start_as_current_span(
            'ledger.reserve',
            attributes={'event.id': str(event_id), 'reserve.quantity': quantity},
        ):

            async def _attempt() -> Reservation:
                event = await self.inventory_store.reserve_if_available(
                    event_id=event_id, quantity=quantity
                )
                if event is None:
                    raise await self._classify_reserve_miss(event_id=event_id, quantity=quantity)
                return Reservation(
                    event_id=event.id,
                    quantity=quantity,
                    sold_tickets=event.sold_tickets,
                    available_tickets=event.available_tickets,
                    committed_at=event.updated_at or datetime.now(timezone.utc),
                )

            reservation = await self._with_retry('reserve', _attempt)
            Logger.base.info(
                f'🎟️ [LEDGER] Reserved {quantity} for event {event_id} '
                f'(sold={reservation.sold_tickets}, available={reservation.available_tickets})'
            )
            return reservation

    async def _classify_reserve_miss(self, *, event_id: UUID, quantity: int) -> CustomBaseError:
        current = await self.inventory_store.get_event(event_id=event_id)
        if current is None:
            return NotFoundError('Event not found')
        if current.status != EventStatus.ACTIVE:
            return NotActiveError()
        if current.available_tickets < quantity:
            return InsufficientCapacityError(remaining=current.available_tickets)
        # Guard missed but the row now satisfies it: a concurrent release landed in between
        return StorageConflictError('Inventory changed during reservation')

    @Logger.io
    async def release(self, *, event_id: UUID, quantity: int) -> int:
        """
        Return `quantity` tickets to the available pool.

        Clamped to the sold count. A short release means something was released twice;
        it is logged as an anomaly instead of being applied again.

        Returns:
            Number of tickets actually released
        """
        if quantity < 1:
            raise DomainError('quantity must be at least 1')

        with self.tracer.start_as_current_span(
            'ledger.release',
            attributes={'event.id': str(event_id), 'release.quantity': quantity},
        ):

            async def _attempt() -> tuple[Event, int]:
                outcome = await self.inventory_store.release(event_id=event_id, quantity=quantity)
                if outcome is None:
                    raise NotFoundError('Event not found')
                return outcome

            event, released = await self._with_retry('release', _attempt)

            if released < quantity:
                metrics.release_anomalies.inc()
                Logger.base.warning(
                    f'⚠️ [LEDGER] Release anomaly on event {event_id}: '
                    f'requested {quantity}, released {released} (sold was short)'
                )
            else:
                Logger.base.info(
                    f'↩️ [LEDGER] Released {released} for event {event_id} '
                    f'(sold={event.sold_tickets}, available={event.available_tickets})'
                )
            return released

    @Logger.io
    async def transition_lifecycle(
        self, *, event_id: UUID, from_status: EventStatus, to_status: EventStatus
    ) -> Event:
        """
        Guarded lifecycle transition.

        Returns:
            The committed event row, a consistent snapshot of the transition instant

        Raises:
            InvalidTransitionError: transition not allowed, or current status != from_status
            NotFoundError: event does not exist
        """
        if not is_valid_transition(from_status, to_status):
            raise InvalidTransitionError(
                f'Cannot move an event from {from_status.value} to {to_status.value}'
            )
        return await self._compare_and_set(
            event_id=event_id, from_status=from_status, to_status=to_status
        )

    @Logger.io
    async def revert_transition(
        self, *, event_id: UUID, from_status: EventStatus, to_status: EventStatus
    ) -> Event:
        """Compensating transition after a failed archive write; skips the transition table."""
        Logger.base.warning(
            f'⏪ [LEDGER] Reverting event {event_id} {from_status.value} -> {to_status.value}'
        )
        return await self._compare_and_set(
            event_id=event_id, from_status=from_status, to_status=to_status
        )

    async def _compare_and_set(
        self, *, event_id: UUID, from_status: EventStatus, to_status: EventStatus
    ) -> Event:
        with self.tracer.start_as_current_span(
            'ledger.transition',
            attributes={
                'event.id': str(event_id),
                'transition.from': from_status.value,
                'transition.to': to_status.value,
            },
        ):

            async def _attempt() -> Event:
                event = await self.inventory_store.compare_and_set_status(
                    event_id=event_id, from_status=from_status, to_status=to_status
                )
                if event is not None:
                    return event
                current = await self.inventory_store.get_event(event_id=event_id)
                if current is None:
                    raise NotFoundError('Event not found')
                raise InvalidTransitionError(
                    f'Event is {current.status.value}, expected {from_status.value}'
                )

            event = await self._with_retry('transition', _attempt)
            Logger.base.info(
                f'🔀 [LEDGER] Event {event_id} {from_status.value} -> {to_status.value}'
            )
            return event
