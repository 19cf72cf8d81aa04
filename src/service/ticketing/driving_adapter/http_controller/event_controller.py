from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from opentelemetry import trace

from src.platform.constant.route_constant import (
    EVENT_ATTENDEES,
    EVENT_CANCEL,
    EVENT_CREATE,
    EVENT_DELETE,
    EVENT_GET,
    EVENT_LIST,
    EVENT_PUBLISH,
    EVENT_UPDATE,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.ticketing.app.command.archive_event_use_case import ArchiveEventUseCase
from src.service.ticketing.app.command.create_event_use_case import CreateEventUseCase
from src.service.ticketing.app.command.delete_event_use_case import DeleteEventUseCase
from src.service.ticketing.app.command.publish_event_use_case import PublishEventUseCase
from src.service.ticketing.app.command.update_event_details_use_case import (
    UpdateEventDetailsUseCase,
)
from src.service.ticketing.app.query.get_attendees_for_event_use_case import (
    GetAttendeesForEventUseCase,
)
from src.service.ticketing.app.query.get_event_use_case import GetEventUseCase
from src.service.ticketing.app.query.list_events_use_case import ListEventsUseCase
from src.service.ticketing.domain.enum.archive_reason import ArchiveReason
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.driving_adapter.http_controller.actor import require_actor
from src.service.ticketing.driving_adapter.http_controller.schema.archive_schema import (
    ArchiveRecordResponse,
)
from src.service.ticketing.driving_adapter.http_controller.schema.event_schema import (
    AttendeeResponse,
    EventCreateRequest,
    EventResponse,
    EventUpdateRequest,
)


router = APIRouter(tags=['event'])
tracer = trace.get_tracer(__name__)


@router.post(EVENT_CREATE, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    actor_id: str = Depends(require_actor),
    use_case: CreateEventUseCase = Depends(CreateEventUseCase.depends),
) -> EventResponse:
    with tracer.start_as_current_span('controller.create_event') as span:
        span.set_attribute('organizer.id', actor_id)
        event = await use_case.create_event(
            organizer_id=actor_id,
            name=request.name,
            description=request.description,
            location=request.location,
            starts_at=request.starts_at,
            ends_at=request.ends_at,
            total_tickets=request.total_tickets,
            publish=request.publish,
        )
        span.set_attribute('event.id', str(event.id))
        return EventResponse.from_entity(event)


@router.get(EVENT_LIST)
@Logger.io
async def list_events(
    event_status: Optional[EventStatus] = None,
    organizer_id: Optional[str] = None,
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_events(status=event_status, organizer_id=organizer_id)
    return [EventResponse.from_entity(e) for e in events]


@router.get(EVENT_GET)
@Logger.io
async def get_event(
    event_id: UtilsUUID7,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventResponse:
    event = await use_case.get_by_id(event_id=event_id)
    return EventResponse.from_entity(event)


@router.patch(EVENT_UPDATE)
@Logger.io
async def update_event(
    event_id: UtilsUUID7,
    request: EventUpdateRequest,
    actor_id: str = Depends(require_actor),
    use_case: UpdateEventDetailsUseCase = Depends(UpdateEventDetailsUseCase.depends),
) -> EventResponse:
    event = await use_case.update_details(
        event_id=event_id,
        actor_id=actor_id,
        name=request.name,
        description=request.description,
        location=request.location,
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        total_tickets=request.total_tickets,
    )
    return EventResponse.from_entity(event)


@router.delete(EVENT_DELETE, status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_event(
    event_id: UtilsUUID7,
    actor_id: str = Depends(require_actor),
    use_case: DeleteEventUseCase = Depends(DeleteEventUseCase.depends),
) -> Response:
    await use_case.delete(event_id=event_id, actor_id=actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(EVENT_PUBLISH)
@Logger.io
async def publish_event(
    event_id: UtilsUUID7,
    actor_id: str = Depends(require_actor),
    use_case: PublishEventUseCase = Depends(PublishEventUseCase.depends),
) -> EventResponse:
    event = await use_case.publish(event_id=event_id, actor_id=actor_id)
    return EventResponse.from_entity(event)


@router.post(EVENT_CANCEL)
@Logger.io
async def cancel_event(
    event_id: UtilsUUID7,
    actor_id: str = Depends(require_actor),
    use_case: ArchiveEventUseCase = Depends(ArchiveEventUseCase.depends),
) -> ArchiveRecordResponse:
    """Cancel an active event; it is archived with reason 'cancelled' and cannot be restored."""
    record = await use_case.archive(
        event_id=event_id, reason=ArchiveReason.CANCELLED, actor_id=actor_id
    )
    return ArchiveRecordResponse.from_entity(record)


@router.get(EVENT_ATTENDEES)
@Logger.io
async def get_attendees(
    event_id: UtilsUUID7,
    include_cancelled: bool = False,
    actor_id: str = Depends(require_actor),
    use_case: GetAttendeesForEventUseCase = Depends(GetAttendeesForEventUseCase.depends),
) -> List[AttendeeResponse]:
    bookings = await use_case.get_attendees(
        event_id=event_id, requester_id=actor_id, include_cancelled=include_cancelled
    )
    return [AttendeeResponse.from_entity(b) for b in bookings]
