from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.notification_message import NotificationMessage
from src.service.ticketing.app.interface.i_notification_sender import INotificationSender


class LoggingNotificationSender(INotificationSender):
    """Default channel for local runs: writes the notification to the log."""

    async def send(self, *, message: NotificationMessage) -> None:
        Logger.base.info(
            f'📬 [NOTIFY] {message.template_kind.value} -> user={message.user_id} '
            f'payload={message.payload}'
        )
