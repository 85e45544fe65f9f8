"""Service for reading and cancelling a user's bookings."""

from typing import List

from parkease.domain.errors import NotFound
from parkease.domain.models.booking import Booking
from parkease.domain.ports.persistence import BookingRepository


class BookingService:
    """Service for booking retrieval and cancellation."""

    def __init__(self, booking_repository: BookingRepository):
        self.booking_repository = booking_repository

    def list_bookings(self, user_id: int) -> List[Booking]:
        return self.booking_repository.list_bookings(user_id)

    def get_booking(self, booking_id: int, user_id: int) -> Booking:
        booking = self.booking_repository.get_booking(booking_id, user_id)
        if not booking:
            raise NotFound("Booking not found.")
        return booking

    def cancel_booking(self, booking_id: int, user_id: int) -> Booking:
        """
        Cancel a pending or confirmed booking.

        Args:
            booking_id: Booking ID
            user_id: User ID (for authorization)

        Returns:
            The cancelled Booking

        Raises:
            NotFound: If the booking does not exist or belongs to someone else
            ValueError: If the booking is no longer cancellable
        """
        booking = self.get_booking(booking_id, user_id)
        if not booking.is_cancellable():
            raise ValueError(f"Booking cannot be cancelled while {booking.status.value}.")
        if not self.booking_repository.cancel_booking(booking_id, user_id):
            # Status changed between the read and the conditional update.
            booking = self.get_booking(booking_id, user_id)
            raise ValueError(f"Booking cannot be cancelled while {booking.status.value}.")
        return self.get_booking(booking_id, user_id)
