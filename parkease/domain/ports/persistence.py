from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from ..models import (
    Booking,
    BookingStatus,
    ContentPage,
    Location,
    LocationStatus,
    PageStatus,
    PaymentMethod,
    Role,
    StoredToken,
    TokenPurpose,
    User,
    Vehicle,
)


class UserRepository(Protocol):
    """Persistence functions related to user accounts."""

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        ...

    def create_user(
        self,
        email: str,
        password_hash: Optional[str],
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        role: Role = Role.CUSTOMER,
        email_verified: bool = False,
        is_guest: bool = False,
    ) -> User:
        """Insert a user; raises EmailAlreadyRegistered when the email is taken."""
        ...

    def update_user_profile(
        self,
        user_id: int,
        *,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Optional[User]:
        ...

    def update_user_password(self, user_id: int, password_hash: str) -> Optional[User]:
        ...

    def mark_email_verified(self, user_id: int) -> Optional[User]:
        ...


class TokenRepository(Protocol):
    """Storage for hashed single-use tokens, one per user and purpose."""

    def save_token(
        self,
        user_id: int,
        purpose: TokenPurpose,
        token_hash: str,
        expires_at: datetime,
    ) -> None:
        ...

    def consume_token(self, token_hash: str, purpose: TokenPurpose) -> Optional[StoredToken]:
        """Remove and return the matching token in a single atomic step."""
        ...


class VehicleRepository(Protocol):
    def list_vehicles(self, user_id: int) -> List[Vehicle]:
        ...

    def get_vehicle(self, vehicle_id: int, user_id: int) -> Optional[Vehicle]:
        ...

    def create_vehicle(
        self,
        user_id: int,
        make: str,
        model: str,
        license_plate: str,
        year: Optional[int] = None,
        color: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Vehicle:
        ...

    def update_vehicle(
        self,
        vehicle_id: int,
        user_id: int,
        *,
        make: Optional[str] = None,
        model: Optional[str] = None,
        year: Optional[int] = None,
        color: Optional[str] = None,
        license_plate: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Optional[Vehicle]:
        ...

    def delete_vehicle(self, vehicle_id: int, user_id: int) -> bool:
        ...

    def set_default_vehicle(self, vehicle_id: int, user_id: int) -> bool:
        ...


class PaymentMethodRepository(Protocol):
    def list_payment_methods(self, user_id: int) -> List[PaymentMethod]:
        ...

    def find_payment_method(
        self,
        user_id: int,
        brand: str,
        last4: str,
        expiry_month: int,
        expiry_year: int,
    ) -> Optional[PaymentMethod]:
        ...

    def get_payment_method(self, payment_method_id: int, user_id: int) -> Optional[PaymentMethod]:
        ...

    def create_payment_method(
        self,
        user_id: int,
        brand: str,
        last4: str,
        expiry_month: int,
        expiry_year: int,
        cardholder_name: Optional[str] = None,
    ) -> PaymentMethod:
        ...

    def delete_payment_method(self, payment_method_id: int, user_id: int) -> bool:
        ...

    def set_default_payment_method(self, payment_method_id: int, user_id: int) -> bool:
        ...


class BookingRepository(Protocol):
    def list_bookings(self, user_id: int) -> List[Booking]:
        ...

    def get_booking(self, booking_id: int, user_id: int) -> Optional[Booking]:
        ...

    def create_booking(
        self,
        user_id: int,
        location_name: str,
        check_in: datetime,
        check_out: datetime,
        total_price: float,
        confirmation_code: str,
        location_address: Optional[str] = None,
        vehicle_plate: Optional[str] = None,
        status: BookingStatus = BookingStatus.CONFIRMED,
        location_id: Optional[int] = None,
    ) -> Booking:
        ...

    def cancel_booking(self, booking_id: int, user_id: int) -> bool:
        """Flip a pending/confirmed booking to cancelled; False when nothing changed."""
        ...


class LocationRepository(Protocol):
    """Read access to parking locations, plus the insert used when seeding."""

    def list_locations(self, status: LocationStatus = LocationStatus.ACTIVE) -> List[Location]:
        """Locations with the given status, ordered by name."""
        ...

    def get_location(self, location_id: int) -> Optional[Location]:
        ...

    def search_locations(
        self,
        city: Optional[str] = None,
        airport_code: Optional[str] = None,
    ) -> List[Location]:
        """Active locations whose city contains ``city`` or whose airport code equals ``airport_code``."""
        ...

    def count_overlapping_bookings(self, location_id: int, check_in: datetime, check_out: datetime) -> int:
        """Pending or confirmed bookings at the location intersecting the window."""
        ...

    def create_location(
        self,
        name: str,
        address: str,
        city: str,
        price_per_day: float,
        total_spots: int,
        airport_code: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        owner_id: Optional[int] = None,
        status: LocationStatus = LocationStatus.ACTIVE,
        amenities: Optional[List[str]] = None,
        covered: bool = False,
        shuttle: bool = False,
        valet: bool = False,
        description: Optional[str] = None,
    ) -> Location:
        ...


class ContentRepository(Protocol):
    def get_page_by_slug(self, slug: str, status: PageStatus = PageStatus.PUBLISHED) -> Optional[ContentPage]:
        ...

    def create_page(
        self,
        slug: str,
        title: str,
        content: str,
        meta_title: Optional[str] = None,
        meta_description: Optional[str] = None,
        status: PageStatus = PageStatus.DRAFT,
    ) -> ContentPage:
        ...


class PersistenceGateway(
    UserRepository,
    TokenRepository,
    VehicleRepository,
    PaymentMethodRepository,
    BookingRepository,
    LocationRepository,
    ContentRepository,
    Protocol,
):
    """Composite gateway combining every persistence concern used by the app."""

    def close(self) -> None:
        ...
