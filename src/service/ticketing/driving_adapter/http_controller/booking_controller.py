from typing import List, Optional

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.constant.route_constant import (
    BOOKING_CANCEL,
    BOOKING_CREATE,
    BOOKING_GET,
    BOOKING_MY_BOOKINGS,
    BOOKING_RSVP,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.ticketing.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.ticketing.app.command.create_booking_use_case import (
    CreateBookingUseCase,
    CreateRsvpUseCase,
)
from src.service.ticketing.app.query.get_booking_use_case import GetBookingUseCase
from src.service.ticketing.app.query.list_user_bookings_use_case import (
    ListUserBookingsUseCase,
)
from src.service.ticketing.domain.enum.booking_status import BookingKind, BookingStatus
from src.service.ticketing.domain.value_object.attendee_info import AttendeeInfo
from src.service.ticketing.driving_adapter.http_controller.actor import (
    get_optional_actor,
    require_actor,
)
from src.service.ticketing.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
    RsvpCreateRequest,
)


router = APIRouter(tags=['booking'])
tracer = trace.get_tracer(__name__)


@router.get(BOOKING_MY_BOOKINGS)
@Logger.io
async def list_my_bookings(
    booking_status: Optional[BookingStatus] = None,
    actor_id: str = Depends(require_actor),
    use_case: ListUserBookingsUseCase = Depends(ListUserBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_user_bookings(user_id=actor_id, status=booking_status)
    return [BookingResponse.from_entity(b) for b in bookings]


@router.post(BOOKING_CREATE, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    actor_id: Optional[str] = Depends(get_optional_actor),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('event.id', str(request.event_id))
        span.set_attribute('booking.quantity', request.quantity)

        booking = await use_case.create_booking(
            event_id=request.event_id,
            attendee=AttendeeInfo(
                user_id=actor_id, email=request.email, name=request.name, phone=request.phone
            ),
            quantity=request.quantity,
            kind=BookingKind.PURCHASE,
            source='app',
        )
        span.set_attribute('booking.id', str(booking.id))
        return BookingResponse.from_entity(booking)


@router.post(BOOKING_RSVP, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_rsvp(
    request: RsvpCreateRequest,
    use_case: CreateRsvpUseCase = Depends(CreateRsvpUseCase.depends),
) -> BookingResponse:
    booking = await use_case.create_rsvp(
        event_id=request.event_id,
        name=request.name,
        email=request.email,
        phone=request.phone,
        quantity=request.quantity,
    )
    return BookingResponse.from_entity(booking)


@router.get(BOOKING_GET)
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    actor_id: Optional[str] = Depends(get_optional_actor),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking(booking_id=booking_id, requester_id=actor_id)
    return BookingResponse.from_entity(booking)


@router.patch(BOOKING_CANCEL)
@Logger.io
async def cancel_booking(
    booking_id: UtilsUUID7,
    actor_id: Optional[str] = Depends(get_optional_actor),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.cancel_booking(booking_id=booking_id, requester_id=actor_id)
    return BookingResponse.from_entity(booking)
