from abc import ABC, abstractmethod
from typing import List

from src.service.ticketing.domain.entity.reconciliation_flag_entity import ReconciliationFlag


class IReconciliationStore(ABC):
    """Durable queue of inventory mismatches awaiting an operator or a repair job."""

    @abstractmethod
    async def flag(self, *, flag: ReconciliationFlag) -> ReconciliationFlag:
        pass

    @abstractmethod
    async def list_open(self) -> List[ReconciliationFlag]:
        pass
