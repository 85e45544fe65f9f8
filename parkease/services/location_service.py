"""Service for browsing and searching parking locations."""

from datetime import datetime
from typing import List, Optional, Tuple

from parkease.domain.errors import NotFound
from parkease.domain.geo import haversine_miles
from parkease.domain.models.location import Availability, Location, LocationMatch
from parkease.domain.ports.persistence import LocationRepository


class LocationService:
    """Public, read-only access to active parking locations."""

    def __init__(self, location_repository: LocationRepository):
        self.location_repository = location_repository

    def list_locations(self) -> List[Location]:
        """List active locations ordered by name."""
        return self.location_repository.list_locations()

    def get_location(
        self,
        location_id: int,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
    ) -> Tuple[Location, Optional[Availability]]:
        """
        Get an active location, with availability when a window is given.

        Args:
            location_id: Location ID
            check_in: Start of the requested stay
            check_out: End of the requested stay

        Returns:
            The location and its availability (``None`` without a full window)

        Raises:
            NotFound: If the location does not exist or is not active
            ValueError: If the window is reversed or empty
        """
        location = self.location_repository.get_location(location_id)
        if not location or not location.is_public():
            raise NotFound("Location not found.")
        if check_in is None or check_out is None:
            return location, None
        _check_window(check_in, check_out)
        return location, self._availability(location, check_in, check_out)

    def search(
        self,
        check_in: datetime,
        check_out: datetime,
        city: Optional[str] = None,
        airport_code: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> List[LocationMatch]:
        """
        Find active locations with free spots for the whole window.

        City matches are case-insensitive substrings and airport codes are
        compared case-insensitively; giving both matches either. With a
        reference point, results carry the distance in miles and come
        nearest first; otherwise they are ordered by name.
        """
        _check_window(check_in, check_out)
        if (latitude is None) != (longitude is None):
            raise ValueError("Latitude and longitude must be given together.")

        matches = []
        for location in self.location_repository.search_locations(
            city=city.strip() if city else None,
            airport_code=airport_code.strip() if airport_code else None,
        ):
            availability = self._availability(location, check_in, check_out)
            if not availability.is_available:
                continue
            distance = None
            if latitude is not None and location.has_coordinates():
                distance = haversine_miles(latitude, longitude, location.latitude, location.longitude)
            matches.append(LocationMatch(location, availability, distance))

        if latitude is not None:
            # Locations without coordinates go last.
            matches.sort(key=lambda m: (m.distance_miles is None, m.distance_miles or 0.0))
        return matches

    def _availability(self, location: Location, check_in: datetime, check_out: datetime) -> Availability:
        booked = self.location_repository.count_overlapping_bookings(location.id, check_in, check_out)
        return Availability(total_spots=location.total_spots, booked_spots=booked)


def _check_window(check_in: datetime, check_out: datetime) -> None:
    if (check_in.tzinfo is None) != (check_out.tzinfo is None):
        raise ValueError("Check-in and check-out must both carry a timezone or neither.")
    if check_out <= check_in:
        raise ValueError("Check-out must be after check-in.")
