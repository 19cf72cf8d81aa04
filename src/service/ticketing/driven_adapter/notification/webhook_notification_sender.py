"""Posts notifications as JSON to an external delivery service."""

from typing import Optional

import httpx

from src.platform.exception.exceptions import DownstreamFailureError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.notification_message import NotificationMessage
from src.service.ticketing.app.interface.i_notification_sender import INotificationSender


class WebhookNotificationSender(INotificationSender):
    def __init__(
        self,
        *,
        url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def send(self, *, message: NotificationMessage) -> None:
        if not self.url:
            raise DownstreamFailureError('NOTIFICATION_WEBHOOK_URL is not configured')
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=message.to_dict())
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise DownstreamFailureError(f'Notification webhook failed: {e}') from e
        Logger.base.debug(
            f'📬 [NOTIFY] Webhook accepted {message.template_kind.value} ({response.status_code})'
        )
