"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.ticketing.driven_adapter.model.archive_model import (
    ArchiveLogModel,
    ArchiveRecordModel,
)
from src.service.ticketing.driven_adapter.model.booking_model import BookingModel
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.reconciliation_model import (
    InventoryReconciliationModel,
)

__all__ = [
    'ArchiveLogModel',
    'ArchiveRecordModel',
    'BookingModel',
    'EventModel',
    'InventoryReconciliationModel',
]
