from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ....core.dependencies import get_vehicle_service
from ....domain.models import SessionUser
from ....services.vehicle_service import VehicleService
from ...api.dependencies import get_current_session
from ...api.schemas.vehicle_schemas import VehicleCreateRequest, VehicleResponse, VehicleUpdateRequest

router = APIRouter(prefix="/api/vehicles", tags=["Vehicles"])


@router.get("", response_model=List[VehicleResponse])
async def list_vehicles(
    session: SessionUser = Depends(get_current_session),
    vehicle_service: VehicleService = Depends(get_vehicle_service),
) -> List[VehicleResponse]:
    return [VehicleResponse.model_validate(v) for v in vehicle_service.list_vehicles(session.id)]


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    payload: VehicleCreateRequest,
    session: SessionUser = Depends(get_current_session),
    vehicle_service: VehicleService = Depends(get_vehicle_service),
) -> VehicleResponse:
    try:
        vehicle = vehicle_service.create_vehicle(session.id, **payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return VehicleResponse.model_validate(vehicle)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: int,
    session: SessionUser = Depends(get_current_session),
    vehicle_service: VehicleService = Depends(get_vehicle_service),
) -> VehicleResponse:
    return VehicleResponse.model_validate(vehicle_service.get_vehicle(vehicle_id, session.id))


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: int,
    payload: VehicleUpdateRequest,
    session: SessionUser = Depends(get_current_session),
    vehicle_service: VehicleService = Depends(get_vehicle_service),
) -> VehicleResponse:
    try:
        vehicle = vehicle_service.update_vehicle(vehicle_id, session.id, **payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return VehicleResponse.model_validate(vehicle)


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: int,
    session: SessionUser = Depends(get_current_session),
    vehicle_service: VehicleService = Depends(get_vehicle_service),
) -> Response:
    vehicle_service.delete_vehicle(vehicle_id, session.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{vehicle_id}/default", response_model=VehicleResponse)
async def set_default_vehicle(
    vehicle_id: int,
    session: SessionUser = Depends(get_current_session),
    vehicle_service: VehicleService = Depends(get_vehicle_service),
) -> VehicleResponse:
    return VehicleResponse.model_validate(vehicle_service.set_default(vehicle_id, session.id))
