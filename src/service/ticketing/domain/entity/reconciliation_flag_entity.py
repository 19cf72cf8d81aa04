from datetime import datetime, timezone

import attrs
from uuid_utils import UUID, uuid7


@attrs.frozen
class ReconciliationFlag:
    """A committed cancellation whose ledger release could not be applied."""

    event_id: UUID
    booking_id: UUID
    quantity: int
    reason: str
    created_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))
    id: UUID = attrs.field(factory=uuid7)
