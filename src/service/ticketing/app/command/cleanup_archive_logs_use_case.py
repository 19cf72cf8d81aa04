from datetime import datetime, timedelta, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_archive_store import IArchiveStore


class CleanupArchiveLogsUseCase:
    def __init__(self, *, archive_store: IArchiveStore) -> None:
        self.archive_store = archive_store

    @classmethod
    @inject
    def depends(
        cls,
        archive_store: IArchiveStore = Depends(Provide[Container.archive_store]),
    ) -> Self:
        return cls(archive_store=archive_store)

    @Logger.io
    async def cleanup(
        self,
        *,
        days_to_keep: int = settings.ARCHIVE_LOG_RETENTION_DAYS,
        now: Optional[datetime] = None,
    ) -> int:
        """Delete audit entries older than `days_to_keep` days. Returns the number deleted."""
        if days_to_keep < 0:
            raise DomainError('days_to_keep must be zero or greater')

        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days_to_keep)
        deleted = await self.archive_store.delete_logs_before(cutoff=cutoff)
        Logger.base.info(f'🧹 [ARCHIVE-LOG] Deleted {deleted} entries older than {cutoff}')
        return deleted
