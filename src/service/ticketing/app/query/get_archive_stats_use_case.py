from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.archive_result import ArchiveStats
from src.service.ticketing.app.interface.i_inventory_store import IInventoryStore
from src.service.ticketing.domain.enum.event_status import EventStatus


class GetArchiveStatsUseCase:
    def __init__(self, *, inventory_store: IInventoryStore) -> None:
        self.inventory_store = inventory_store

    @classmethod
    @inject
    def depends(
        cls,
        inventory_store: IInventoryStore = Depends(Provide[Container.inventory_store]),
    ) -> Self:
        return cls(inventory_store=inventory_store)

    @Logger.io
    async def get_stats(self, *, organizer_id: Optional[str] = None) -> ArchiveStats:
        counts = await self.inventory_store.count_by_status(organizer_id=organizer_id)
        return ArchiveStats(
            active=counts.get(EventStatus.ACTIVE, 0),
            archived=counts.get(EventStatus.ARCHIVED, 0),
            cancelled=counts.get(EventStatus.CANCELLED, 0),
            draft=counts.get(EventStatus.DRAFT, 0),
            total=sum(counts.values()),
        )
