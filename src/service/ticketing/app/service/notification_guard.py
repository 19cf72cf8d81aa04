from typing import Any, Optional

from src.platform.exception.exceptions import DownstreamFailureError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.ticketing.domain.enum.notification_kind import NotificationKind


def notify_best_effort(
    dispatcher: INotificationDispatcher,
    *,
    user_id: Optional[str],
    template_kind: NotificationKind,
    payload: dict[str, Any],
) -> None:
    """Hand a notification to the dispatcher; a failing dispatcher never fails the caller."""
    try:
        dispatcher.notify(user_id=user_id, template_kind=template_kind, payload=payload)
    except Exception as e:
        failure = DownstreamFailureError(f'{template_kind.value} notification failed: {e}')
        Logger.base.warning(f'⚠️ [NOTIFY] {failure.message}')
