from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.dependencies import get_booking_service
from ....domain.models import SessionUser
from ....services.booking_service import BookingService
from ...api.dependencies import get_current_session
from ...api.schemas.booking_schemas import BookingResponse

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    session: SessionUser = Depends(get_current_session),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    return [BookingResponse.model_validate(b) for b in booking_service.list_bookings(session.id)]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    session: SessionUser = Depends(get_current_session),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(booking_service.get_booking(booking_id, session.id))


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    session: SessionUser = Depends(get_current_session),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = booking_service.cancel_booking(booking_id, session.id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return BookingResponse.model_validate(booking)
