from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_archive_store import IArchiveStore
from src.service.ticketing.domain.entity.archive_record_entity import ArchiveRecord


class ListArchivedEventsUseCase:
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
    async def list_archived(
        self,
        *,
        organizer_id: Optional[str] = None,
        limit: int = settings.ARCHIVED_EVENTS_PAGE_SIZE,
    ) -> List[ArchiveRecord]:
        """Archive records still in the archive (restored ones excluded), newest first."""
        return await self.archive_store.list_records(
            organizer_id=organizer_id, include_restored=False, limit=limit
        )
