from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ....domain.geo import format_distance
from ....domain.models import Availability, Location, LocationMatch


class LocationSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    city: str
    airport_code: Optional[str] = None


class AvailabilityResponse(BaseModel):
    total_spots: int
    available_spots: int
    is_available: bool

    @classmethod
    def from_availability(cls, availability: Availability) -> "AvailabilityResponse":
        return cls(
            total_spots=availability.total_spots,
            available_spots=availability.available_spots,
            is_available=availability.is_available,
        )


class LocationResponse(BaseModel):
    """Full listing; ``availability`` is present when a stay window was requested."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    city: str
    airport_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    price_per_day: float
    total_spots: int
    amenities: List[str] = []
    covered: bool
    shuttle: bool
    valet: bool
    description: Optional[str] = None
    created_at: datetime
    availability: Optional[AvailabilityResponse] = None

    @classmethod
    def from_location(
        cls, location: Location, availability: Optional[Availability] = None
    ) -> "LocationResponse":
        response = cls.model_validate(location)
        if availability is not None:
            response.availability = AvailabilityResponse.from_availability(availability)
        return response


class LocationSearchResult(BaseModel):
    id: int
    name: str
    address: str
    city: str
    airport_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    price_per_day: float
    amenities: List[str] = []
    covered: bool
    shuttle: bool
    valet: bool
    available_spots: int
    distance_miles: Optional[float] = None
    distance: Optional[str] = None

    @classmethod
    def from_match(cls, match: LocationMatch) -> "LocationSearchResult":
        location = match.location
        return cls(
            id=location.id,
            name=location.name,
            address=location.address,
            city=location.city,
            airport_code=location.airport_code,
            latitude=location.latitude,
            longitude=location.longitude,
            price_per_day=location.price_per_day,
            amenities=location.amenities,
            covered=location.covered,
            shuttle=location.shuttle,
            valet=location.valet,
            available_spots=match.availability.available_spots,
            distance_miles=round(match.distance_miles, 2) if match.distance_miles is not None else None,
            distance=format_distance(match.distance_miles) if match.distance_miles is not None else None,
        )
