"""
Background Notification Dispatcher

Driven Adapter implementing INotificationDispatcher.

Architecture:
- notify() only enqueues onto a bounded anyio memory stream and returns
- run() is started in the application task group and drains the stream
- A full buffer drops the message with a warning; the caller never waits
- Sender failures are logged and counted, never re-raised into the request path

Limitations:
- Single-instance only, queued messages are lost on restart
"""

from typing import Any, Optional

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.ticketing.app.dto.notification_message import NotificationMessage
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.app.interface.i_notification_sender import INotificationSender
from src.service.ticketing.domain.enum.notification_kind import NotificationKind


class BackgroundNotificationDispatcher(INotificationDispatcher):
    def __init__(self, *, sender: INotificationSender, max_buffer_size: int = 100) -> None:
        self.sender = sender
        self._send_stream: MemoryObjectSendStream[NotificationMessage]
        self._receive_stream: MemoryObjectReceiveStream[NotificationMessage]
        self._send_stream, self._receive_stream = anyio.create_memory_object_stream[
            NotificationMessage
        ](max_buffer_size=max_buffer_size)

    def notify(
        self, *, user_id: Optional[str], template_kind: NotificationKind, payload: dict[str, Any]
    ) -> None:
        message = NotificationMessage(user_id=user_id, template_kind=template_kind, payload=payload)
        try:
            self._send_stream.send_nowait(message)
            metrics.record_notification(template_kind=template_kind.value, result='queued')
        except anyio.WouldBlock:
            metrics.record_notification(template_kind=template_kind.value, result='dropped')
            Logger.base.warning(
                f'⚠️ [NOTIFY] Buffer full, {template_kind.value} for user {user_id} dropped'
            )
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            metrics.record_notification(template_kind=template_kind.value, result='dropped')
            Logger.base.warning(
                f'⚠️ [NOTIFY] Dispatcher closed, {template_kind.value} for user {user_id} dropped'
            )

    @property
    def pending(self) -> int:
        return self._receive_stream.statistics().current_buffer_used

    async def run(self) -> None:
        """Deliver queued messages until close() is called and the buffer is drained."""
        Logger.base.info('📨 [NOTIFY] Dispatcher started')
        async with self._receive_stream:
            async for message in self._receive_stream:
                await self._deliver(message)
        Logger.base.info('📨 [NOTIFY] Dispatcher stopped')

    async def _deliver(self, message: NotificationMessage) -> None:
        kind = message.template_kind.value
        try:
            await self.sender.send(message=message)
        except Exception as e:
            metrics.record_notification(template_kind=kind, result='failed')
            Logger.base.error(f'❌ [NOTIFY] Failed to deliver {kind} to {message.user_id}: {e}')
            return
        metrics.record_notification(template_kind=kind, result='sent')

    async def close(self) -> None:
        await self._send_stream.aclose()
