from abc import ABC, abstractmethod

from src.service.ticketing.app.dto.notification_message import NotificationMessage


class INotificationSender(ABC):
    """Delivery mechanism behind the dispatcher (push, email, webhook...)."""

    @abstractmethod
    async def send(self, *, message: NotificationMessage) -> None:
        """
        Raises:
            DownstreamFailureError: delivery failed
        """
        pass
