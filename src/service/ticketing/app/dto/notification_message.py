"""Notification message DTO passed from the dispatcher queue to a sender."""

from datetime import datetime, timezone
from typing import Any, Optional

import attrs

from src.service.ticketing.domain.enum.notification_kind import NotificationKind


@attrs.define(frozen=True)
class NotificationMessage:
    user_id: Optional[str]
    template_kind: NotificationKind
    payload: dict[str, Any]
    created_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            'user_id': self.user_id,
            'template_kind': self.template_kind.value,
            'payload': self.payload,
            'created_at': self.created_at.isoformat(),
        }
