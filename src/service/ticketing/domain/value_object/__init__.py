"""Ticketing Domain Value Objects"""

from src.service.ticketing.domain.value_object.attendee_info import AttendeeInfo
from src.service.ticketing.domain.value_object.booking_reference import (
    generate_booking_reference,
)
from src.service.ticketing.domain.value_object.reservation import Reservation

__all__ = ['AttendeeInfo', 'Reservation', 'generate_booking_reference']
