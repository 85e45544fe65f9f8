"""Domain models for the ParkEase application."""

from .booking import Booking, BookingStatus
from .content import ContentPage, PageStatus
from .location import Availability, Location, LocationMatch, LocationStatus
from .payment_method import PaymentMethod
from .session import SessionUser, build_session_user
from .token import IssuedToken, StoredToken, TokenPurpose
from .user import Role, User
from .vehicle import Vehicle

__all__ = [
    "Availability",
    "Booking",
    "BookingStatus",
    "ContentPage",
    "IssuedToken",
    "Location",
    "LocationMatch",
    "LocationStatus",
    "PageStatus",
    "PaymentMethod",
    "Role",
    "SessionUser",
    "StoredToken",
    "TokenPurpose",
    "User",
    "Vehicle",
    "build_session_user",
]
