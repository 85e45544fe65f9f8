"""Service for a user's saved vehicles."""

from typing import List, Optional

from parkease.domain.errors import NotFound
from parkease.domain.models.vehicle import Vehicle
from parkease.domain.ports.persistence import VehicleRepository


class VehicleService:
    """Service for managing saved vehicles.

    Every operation is scoped to the owner: a vehicle belonging to someone
    else is reported exactly like a missing one.
    """

    def __init__(self, vehicle_repository: VehicleRepository):
        self.vehicle_repository = vehicle_repository

    def list_vehicles(self, user_id: int) -> List[Vehicle]:
        """List a user's vehicles, default first, then newest first."""
        return self.vehicle_repository.list_vehicles(user_id)

    def get_vehicle(self, vehicle_id: int, user_id: int) -> Vehicle:
        vehicle = self.vehicle_repository.get_vehicle(vehicle_id, user_id)
        if not vehicle:
            raise NotFound("Vehicle not found.")
        return vehicle

    def create_vehicle(
        self,
        user_id: int,
        make: str,
        model: str,
        license_plate: str,
        year: Optional[int] = None,
        color: Optional[str] = None,
        state: Optional[str] = None,
        is_default: bool = False,
    ) -> Vehicle:
        """
        Save a new vehicle.

        The first vehicle a user saves becomes the default.

        Args:
            user_id: Owner ID
            make: Manufacturer
            model: Model name
            license_plate: Plate number, stored upper-cased
            year: Model year
            color: Body color
            state: Registration state or region
            is_default: Make this the default vehicle

        Returns:
            Created Vehicle
        """
        if not make.strip() or not model.strip() or not license_plate.strip():
            raise ValueError("Make, model and license plate are required.")

        has_vehicles = bool(self.vehicle_repository.list_vehicles(user_id))
        vehicle = self.vehicle_repository.create_vehicle(
            user_id=user_id,
            make=make.strip(),
            model=model.strip(),
            license_plate=license_plate.strip().upper(),
            year=year,
            color=color,
            state=state,
        )
        if is_default or not has_vehicles:
            self.vehicle_repository.set_default_vehicle(vehicle.id, user_id)
            return self.get_vehicle(vehicle.id, user_id)
        return vehicle

    def update_vehicle(
        self,
        vehicle_id: int,
        user_id: int,
        make: Optional[str] = None,
        model: Optional[str] = None,
        license_plate: Optional[str] = None,
        year: Optional[int] = None,
        color: Optional[str] = None,
        state: Optional[str] = None,
        is_default: Optional[bool] = None,
    ) -> Vehicle:
        for label, value in (("Make", make), ("Model", model), ("License plate", license_plate)):
            if value is not None and not value.strip():
                raise ValueError(f"{label} cannot be blank.")

        vehicle = self.vehicle_repository.update_vehicle(
            vehicle_id,
            user_id,
            make=make.strip() if make is not None else None,
            model=model.strip() if model is not None else None,
            year=year,
            color=color,
            license_plate=license_plate.strip().upper() if license_plate is not None else None,
            state=state,
        )
        if not vehicle:
            raise NotFound("Vehicle not found.")
        if is_default:
            return self.set_default(vehicle_id, user_id)
        return vehicle

    def delete_vehicle(self, vehicle_id: int, user_id: int) -> None:
        if not self.vehicle_repository.delete_vehicle(vehicle_id, user_id):
            raise NotFound("Vehicle not found.")

    def set_default(self, vehicle_id: int, user_id: int) -> Vehicle:
        if not self.vehicle_repository.set_default_vehicle(vehicle_id, user_id):
            raise NotFound("Vehicle not found.")
        return self.get_vehicle(vehicle_id, user_id)
