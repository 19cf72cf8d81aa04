"""Application layer DTOs"""

from src.service.ticketing.app.dto.archive_result import (
    ArchiveBatchResult,
    ArchiveOutcome,
    ArchiveOutcomeStatus,
    ArchiveStats,
)
from src.service.ticketing.app.dto.notification_message import NotificationMessage

__all__ = [
    'ArchiveBatchResult',
    'ArchiveOutcome',
    'ArchiveOutcomeStatus',
    'ArchiveStats',
    'NotificationMessage',
]
