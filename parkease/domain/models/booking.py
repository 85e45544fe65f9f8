"""Booking domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


CANCELLABLE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)
# Bookings that hold a spot for availability checks.
OCCUPYING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass(slots=True)
class Booking:
    """
    Parking reservation owned by a user.

    Attributes:
        id: Unique identifier
        user_id: Reference to the booking user
        location_id: Booked location, when linked to a listing
        location_name: Name of the parking location
        location_address: Street address of the location
        check_in: Start of the reservation
        check_out: End of the reservation
        status: Current booking status
        total_price: Amount charged, in the platform currency
        confirmation_code: Code shown to the watchman at entry
        vehicle_plate: Plate of the vehicle parked
        created_at: Booking creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    user_id: int
    location_id: Optional[int]
    location_name: str
    location_address: Optional[str]
    check_in: datetime
    check_out: datetime
    status: BookingStatus
    total_price: float
    confirmation_code: str
    vehicle_plate: Optional[str]
    created_at: datetime
    updated_at: datetime

    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_STATUSES
