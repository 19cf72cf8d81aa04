from datetime import datetime
from typing import Dict, List, Optional

import anyio
from uuid_utils import UUID

from src.service.ticketing.app.interface.i_archive_store import IArchiveStore
from src.service.ticketing.domain.entity.archive_record_entity import (
    ArchiveLogEntry,
    ArchiveRecord,
)


class InMemoryArchiveStoreImpl(IArchiveStore):
    def __init__(self) -> None:
        self._records: Dict[UUID, ArchiveRecord] = {}
        self._logs: Dict[UUID, ArchiveLogEntry] = {}

    async def create_record(self, *, record: ArchiveRecord) -> ArchiveRecord:
        await anyio.sleep(0)
        self._records[record.id] = record
        return record

    async def get_record(self, *, archive_id: UUID) -> Optional[ArchiveRecord]:
        await anyio.sleep(0)
        return self._records.get(archive_id)

    async def find_latest_for_event(self, *, event_id: UUID) -> Optional[ArchiveRecord]:
        await anyio.sleep(0)
        candidates = [
            r for r in self._records.values() if r.event_id == event_id and not r.is_restored
        ]
        return max(candidates, key=lambda r: r.archived_at, default=None)

    async def mark_restored(
        self, *, archive_id: UUID, actor_id: Optional[str], restored_at: datetime
    ) -> Optional[ArchiveRecord]:
        await anyio.sleep(0)
        record = self._records.get(archive_id)
        if record is None:
            return None
        updated = record.mark_restored(actor_id=actor_id, at=restored_at)
        self._records[archive_id] = updated
        return updated

    async def list_records(
        self, *, organizer_id: Optional[str] = None, include_restored: bool = False, limit: int = 50
    ) -> List[ArchiveRecord]:
        await anyio.sleep(0)
        records = [
            r
            for r in self._records.values()
            if (organizer_id is None or r.organizer_id == organizer_id)
            and (include_restored or not r.is_restored)
        ]
        records.sort(key=lambda r: r.archived_at, reverse=True)
        return records[:limit]

    async def append_log(self, *, entry: ArchiveLogEntry) -> ArchiveLogEntry:
        await anyio.sleep(0)
        self._logs[entry.id] = entry
        return entry

    async def list_logs(self, *, event_id: UUID) -> List[ArchiveLogEntry]:
        await anyio.sleep(0)
        entries = [e for e in self._logs.values() if e.event_id == event_id]
        return sorted(entries, key=lambda e: e.created_at)

    async def delete_logs_before(self, *, cutoff: datetime) -> int:
        await anyio.sleep(0)
        expired = [entry_id for entry_id, e in self._logs.items() if e.created_at < cutoff]
        for entry_id in expired:
            del self._logs[entry_id]
        return len(expired)

