from abc import ABC, abstractmethod
from typing import Any, Optional

from src.service.ticketing.domain.enum.notification_kind import NotificationKind


class INotificationDispatcher(ABC):
    @abstractmethod
    def notify(
        self, *, user_id: Optional[str], template_kind: NotificationKind, payload: dict[str, Any]
    ) -> None:
        """
        Fire-and-forget. Must return immediately and never block the caller's success path.

        Implementations may drop messages under back-pressure; callers still guard the call.
        """
        pass
