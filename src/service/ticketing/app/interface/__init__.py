"""Application layer interfaces (Ports)"""

from src.service.ticketing.app.interface.i_archive_store import IArchiveStore
from src.service.ticketing.app.interface.i_booking_store import IBookingStore
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.app.interface.i_notification_sender import INotificationSender
from src.service.ticketing.app.interface.i_reconciliation_store import IReconciliationStore

__all__ = [
    'IArchiveStore',
    'IBookingStore',
    'IInventoryStore',
    'INotificationDispatcher',
    'INotificationSender',
    'IReconciliationStore',
]
