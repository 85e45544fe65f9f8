"""Parking location listed on the platform."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class LocationStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(slots=True)
class Location:
    """
    Parking lot or garage offered by an owner.

    Attributes:
        id: Unique identifier
        owner_id: Owning user, if any
        name: Display name
        address: Street address
        city: City the lot serves
        airport_code: IATA code of the nearby airport
        latitude: Decimal degrees, ``None`` when not geocoded
        longitude: Decimal degrees, ``None`` when not geocoded
        price_per_day: Base daily rate
        total_spots: Capacity used for availability checks
        status: Listing status; only active locations are public
        amenities: Free-form amenity labels
        covered: Covered parking
        shuttle: Airport shuttle offered
        valet: Valet service offered
        description: Listing text
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    owner_id: Optional[int]
    name: str
    address: str
    city: str
    airport_code: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    price_per_day: float
    total_spots: int
    status: LocationStatus
    created_at: datetime
    updated_at: datetime
    amenities: List[str] = field(default_factory=list)
    covered: bool = False
    shuttle: bool = False
    valet: bool = False
    description: Optional[str] = None

    def is_public(self) -> bool:
        return self.status is LocationStatus.ACTIVE

    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True, slots=True)
class Availability:
    """Free capacity of a location over a check-in/check-out window."""

    total_spots: int
    booked_spots: int

    @property
    def available_spots(self) -> int:
        return max(self.total_spots - self.booked_spots, 0)

    @property
    def is_available(self) -> bool:
        return self.available_spots > 0


@dataclass(frozen=True, slots=True)
class LocationMatch:
    location: Location
    availability: Availability
    distance_miles: Optional[float] = None
