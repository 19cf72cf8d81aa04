from typing import AsyncContextManager, Callable, List
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_reconciliation_store import IReconciliationStore
from src.service.ticketing.domain.entity.reconciliation_flag_entity import ReconciliationFlag
from src.service.ticketing.driven_adapter.model.reconciliation_model import (
    InventoryReconciliationModel,
)


class ReconciliationStoreImpl(IReconciliationStore):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def flag(self, *, flag: ReconciliationFlag) -> ReconciliationFlag:
        async with self.session_factory() as session:
            session.add(
                InventoryReconciliationModel(
                    id=uuid.UUID(str(flag.id)),
                    event_id=uuid.UUID(str(flag.event_id)),
                    booking_id=uuid.UUID(str(flag.booking_id)),
                    quantity=flag.quantity,
                    reason=flag.reason[:500],
                    created_at=flag.created_at,
                )
            )
            await session.commit()
            return flag

    @Logger.io
    async def list_open(self) -> List[ReconciliationFlag]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(InventoryReconciliationModel).order_by(
                    InventoryReconciliationModel.created_at
                )
            )
            return [
                ReconciliationFlag(
                    id=UUID(str(row.id)),
                    event_id=UUID(str(row.event_id)),
                    booking_id=UUID(str(row.booking_id)),
                    quantity=row.quantity,
                    reason=row.reason,
                    created_at=row.created_at,
                )
                for row in result.scalars().all()
            ]
