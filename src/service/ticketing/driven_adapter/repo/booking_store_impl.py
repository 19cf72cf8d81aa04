from typing import AsyncContextManager, Callable, List, Optional
import uuid

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func
from uuid_utils import UUID

from src.platform.database.orm_db_setting import storage_conflict_guard
from src.platform.exception.exceptions import (
    DuplicateRegistrationError,
    ReferenceCollisionError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_booking_store import IBookingStore
from src.service.ticketing.domain.entity.booking_entity import Booking
from src.service.ticketing.domain.enum.booking_status import BookingKind, BookingStatus
from src.service.ticketing.driven_adapter.model.booking_model import (
    UQ_BOOKING_CONFIRMED_RSVP_EMAIL,
    UQ_BOOKING_REFERENCE,
    BookingModel,
)


def _pk(value: UUID) -> uuid.UUID:
    return uuid.UUID(str(value))


class BookingStoreImpl(IBookingStore):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_booking: BookingModel) -> Booking:
        return Booking(
            id=UUID(str(db_booking.id)),
            event_id=UUID(str(db_booking.event_id)),
            reference=db_booking.reference,
            quantity=db_booking.quantity,
            kind=BookingKind(db_booking.kind),
            user_id=db_booking.user_id,
            attendee_email=db_booking.attendee_email,
            attendee_name=db_booking.attendee_name,
            attendee_phone=db_booking.attendee_phone,
            source=db_booking.source,
            status=BookingStatus(db_booking.status),
            created_at=db_booking.created_at,
            updated_at=db_booking.updated_at,
            cancelled_at=db_booking.cancelled_at,
        )

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        db_booking = BookingModel(
            id=_pk(booking.id),
            reference=booking.reference,
            event_id=_pk(booking.event_id),
            user_id=booking.user_id,
            attendee_email=booking.attendee_email,
            attendee_name=booking.attendee_name,
            attendee_phone=booking.attendee_phone,
            quantity=booking.quantity,
            kind=booking.kind.value,
            source=booking.source,
            status=booking.status.value,
        )
        if booking.created_at is not None:
            db_booking.created_at = booking.created_at
            db_booking.updated_at = booking.updated_at or booking.created_at

        with storage_conflict_guard('create_booking'):
            async with self.session_factory() as session:
                session.add(db_booking)
                try:
                    await session.commit()
                except IntegrityError as e:
                    await session.rollback()
                    violated = str(e.orig)
                    if UQ_BOOKING_REFERENCE in violated:
                        raise ReferenceCollisionError(
                            f'Reference {booking.reference} already exists'
                        ) from e
                    if UQ_BOOKING_CONFIRMED_RSVP_EMAIL in violated:
                        raise DuplicateRegistrationError() from e
                    raise
                await session.refresh(db_booking)
                return self._to_entity(db_booking)

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        async with self.session_factory() as session:
            db_booking = await session.get(BookingModel, _pk(booking_id))
            return self._to_entity(db_booking) if db_booking else None

    @Logger.io
    async def get_by_reference(self, *, reference: str) -> Optional[Booking]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.reference == reference)
            )
            db_booking = result.scalar_one_or_none()
            return self._to_entity(db_booking) if db_booking else None

    @Logger.io
    async def find_confirmed_by_email(self, *, event_id: UUID, email: str) -> Optional[Booking]:
        stmt = select(BookingModel).where(
            BookingModel.event_id == _pk(event_id),
            BookingModel.attendee_email == email.strip().lower(),
            BookingModel.user_id.is_(None),
            BookingModel.status == BookingStatus.CONFIRMED.value,
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            db_booking = result.scalars().first()
            return self._to_entity(db_booking) if db_booking else None

    @Logger.io
    async def mark_cancelled(self, *, booking_id: UUID) -> Optional[Booking]:
        stmt = (
            update(BookingModel)
            .where(
                BookingModel.id == _pk(booking_id),
                BookingModel.status == BookingStatus.CONFIRMED.value,
            )
            .values(
                status=BookingStatus.CANCELLED.value,
                cancelled_at=func.now(),
                updated_at=func.now(),
            )
            .returning(BookingModel)
            .execution_options(synchronize_session=False)
        )
        with storage_conflict_guard('cancel_booking'):
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                db_booking = result.scalar_one_or_none()
                booking = self._to_entity(db_booking) if db_booking else None
                await session.commit()
                return booking

    @Logger.io
    async def list_by_event(
        self, *, event_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        stmt = (
            select(BookingModel)
            .where(BookingModel.event_id == _pk(event_id))
            .order_by(BookingModel.created_at, BookingModel.id)
        )
        if status is not None:
            stmt = stmt.where(BookingModel.status == status.value)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_by_user(
        self, *, user_id: str, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        stmt = (
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
        )
        if status is not None:
            stmt = stmt.where(BookingModel.status == status.value)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]
