from datetime import datetime

import attrs
from uuid_utils import UUID


@attrs.frozen
class Reservation:
    """Token for a committed ledger delta: the counters as they stood right after commit."""

    event_id: UUID
    quantity: int
    sold_tickets: int
    available_tickets: int
    committed_at: datetime
