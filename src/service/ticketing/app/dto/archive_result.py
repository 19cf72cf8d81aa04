"""Archive batch / statistics DTOs."""

from enum import StrEnum
from typing import List, Optional

import attrs
from uuid_utils import UUID


class ArchiveOutcomeStatus(StrEnum):
    ARCHIVED = 'archived'
    ELIGIBLE = 'eligible'  # dry run
    FAILED = 'failed'


@attrs.define(frozen=True)
class ArchiveOutcome:
    event_id: UUID
    event_name: str
    status: ArchiveOutcomeStatus
    archive_id: Optional[UUID] = None
    error: Optional[str] = None


@attrs.define
class ArchiveBatchResult:
    """
    Per-event outcome of one batch run.

    Partial success is normal: a failed event is reported here and retried by the
    next run, which skips events that are already archived.
    """

    scanned: int = 0
    dry_run: bool = False
    outcomes: List[ArchiveOutcome] = attrs.field(factory=list)

    @property
    def eligible(self) -> int:
        return len(self.outcomes)

    @property
    def archived(self) -> int:
        return sum(1 for o in self.outcomes if o.status == ArchiveOutcomeStatus.ARCHIVED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == ArchiveOutcomeStatus.FAILED)


@attrs.define(frozen=True)
class ArchiveStats:
    active: int
    archived: int
    cancelled: int
    draft: int
    total: int

    @property
    def archive_rate(self) -> float:
        """Archived share of all events, in percent with one decimal."""
        if self.total == 0:
            return 0.0
        return round(self.archived / self.total * 100, 1)
