from typing import List

import anyio

from src.service.ticketing.app.interface.i_reconciliation_store import IReconciliationStore
from src.service.ticketing.domain.entity.reconciliation_flag_entity import ReconciliationFlag


class InMemoryReconciliationStoreImpl(IReconciliationStore):
    def __init__(self) -> None:
        self._flags: List[ReconciliationFlag] = []

    async def flag(self, *, flag: ReconciliationFlag) -> ReconciliationFlag:
        await anyio.sleep(0)
        self._flags.append(flag)
        return flag

    async def list_open(self) -> List[ReconciliationFlag]:
        await anyio.sleep(0)
        return list(self._flags)
