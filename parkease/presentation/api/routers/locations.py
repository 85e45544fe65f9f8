from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.dependencies import get_location_service
from ....services.location_service import LocationService
from ...api.schemas.location_schemas import LocationResponse, LocationSearchResult, LocationSummary

router = APIRouter(prefix="/api/locations", tags=["Locations"])


@router.get("", response_model=List[LocationSummary])
async def list_locations(
    location_service: LocationService = Depends(get_location_service),
) -> List[LocationSummary]:
    return [LocationSummary.model_validate(loc) for loc in location_service.list_locations()]


@router.get("/search", response_model=List[LocationSearchResult])
async def search_locations(
    city: Optional[str] = Query(default=None, description="Case-insensitive city fragment"),
    airport_code: Optional[str] = Query(default=None, alias="airportCode"),
    check_in: Optional[datetime] = Query(default=None, alias="checkIn"),
    check_out: Optional[datetime] = Query(default=None, alias="checkOut"),
    lat: Optional[float] = Query(default=None, ge=-90, le=90, description="Reference latitude for distances"),
    lng: Optional[float] = Query(default=None, ge=-180, le=180, description="Reference longitude for distances"),
    location_service: LocationService = Depends(get_location_service),
) -> List[LocationSearchResult]:
    if check_in is None or check_out is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Check-in and check-out dates are required.",
        )
    try:
        matches = location_service.search(
            check_in=check_in,
            check_out=check_out,
            city=city,
            airport_code=airport_code,
            latitude=lat,
            longitude=lng,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [LocationSearchResult.from_match(match) for match in matches]


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: int,
    check_in: Optional[datetime] = Query(default=None, alias="checkIn"),
    check_out: Optional[datetime] = Query(default=None, alias="checkOut"),
    location_service: LocationService = Depends(get_location_service),
) -> LocationResponse:
    try:
        location, availability = location_service.get_location(location_id, check_in, check_out)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return LocationResponse.from_location(location, availability)
