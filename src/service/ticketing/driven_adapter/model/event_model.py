from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class EventModel(Base):
    __tablename__ = 'event'
    __table_args__ = (
        # Ledger invariants enforced by the database as a last line of defence
        CheckConstraint('sold_tickets >= 0', name='ck_event_sold_non_negative'),
        CheckConstraint('available_tickets >= 0', name='ck_event_available_non_negative'),
        CheckConstraint(
            'sold_tickets + available_tickets = total_tickets', name='ck_event_ledger_balanced'
        ),
        CheckConstraint(
            "status IN ('draft', 'active', 'archived', 'cancelled')", name='ck_event_status'
        ),
        Index('ix_event_status_starts_at', 'status', 'starts_at'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    organizer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    location: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    total_tickets: Mapped[int] = mapped_column(Integer, nullable=False)
    sold_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_tickets: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='draft')
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
