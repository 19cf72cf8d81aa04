"""Archive Store Interface: archive records (snapshots) and the archive audit log"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from uuid_utils import UUID

from src.service.ticketing.domain.entity.archive_record_entity import (
    ArchiveLogEntry,
    ArchiveRecord,
)


class IArchiveStore(ABC):
    @abstractmethod
    async def create_record(self, *, record: ArchiveRecord) -> ArchiveRecord:
        pass

    @abstractmethod
    async def get_record(self, *, archive_id: UUID) -> Optional[ArchiveRecord]:
        pass

    @abstractmethod
    async def find_latest_for_event(self, *, event_id: UUID) -> Optional[ArchiveRecord]:
        """Most recent record of an event that has not been restored."""
        pass

    @abstractmethod
    async def mark_restored(
        self, *, archive_id: UUID, actor_id: Optional[str], restored_at: datetime
    ) -> Optional[ArchiveRecord]:
        pass

    @abstractmethod
    async def list_records(
        self, *, organizer_id: Optional[str] = None, include_restored: bool = False, limit: int = 50
    ) -> List[ArchiveRecord]:
        """Records newest first."""
        pass

    @abstractmethod
    async def append_log(self, *, entry: ArchiveLogEntry) -> ArchiveLogEntry:
        pass

    @abstractmethod
    async def list_logs(self, *, event_id: UUID) -> List[ArchiveLogEntry]:
        pass

    @abstractmethod
    async def delete_logs_before(self, *, cutoff: datetime) -> int:
        """Delete audit entries created before `cutoff`. Returns the number removed."""
        pass
