from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


UQ_BOOKING_REFERENCE = 'uq_booking_reference'
UQ_BOOKING_CONFIRMED_RSVP_EMAIL = 'uq_booking_confirmed_rsvp_email'


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (
        CheckConstraint('quantity >= 1', name='ck_booking_quantity_positive'),
        CheckConstraint("status IN ('confirmed', 'cancelled')", name='ck_booking_status'),
        UniqueConstraint('reference', name=UQ_BOOKING_REFERENCE),
        # One confirmed anonymous registration per (event, email)
        Index(
            UQ_BOOKING_CONFIRMED_RSVP_EMAIL,
            'event_id',
            'attendee_email',
            unique=True,
            postgresql_where=text("status = 'confirmed' AND user_id IS NULL"),
        ),
        Index('ix_booking_event_status', 'event_id', 'status'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    reference: Mapped[str] = mapped_column(String(64), nullable=False)
    event_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    attendee_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    attendee_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    attendee_phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False, default='app')
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='confirmed')
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

