from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.ticketing.app.interface.i_reconciliation_store import IReconciliationStore
from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.entity.reconciliation_flag_entity import ReconciliationFlag


async def flag_for_reconciliation(
    reconciliation_store: IReconciliationStore,
    *,
    booking: Booking,
    reason: str,
    cause: Exception,
) -> None:
    """
    Record a booking whose ledger release never landed.

    The caller's result stands either way; if even the flag cannot be written the
    mismatch is left in the error log for an operator.
    """
    metrics.reconciliation_flags.labels(reason=reason).inc()
    flag = ReconciliationFlag(
        event_id=booking.event_id,
        booking_id=booking.id,
        quantity=booking.quantity,
        reason=f'{reason}: {cause}',
    )
    try:
        await reconciliation_store.flag(flag=flag)
    except Exception as e:
        Logger.base.error(
            f'🚨 [RECONCILE] Could not flag booking {booking.id} '
            f'(event {booking.event_id}, quantity {booking.quantity}): {e}'
        )
        return
    Logger.base.warning(
        f'🧾 [RECONCILE] Flagged booking {booking.id} on event {booking.event_id}: {reason}'
    )
