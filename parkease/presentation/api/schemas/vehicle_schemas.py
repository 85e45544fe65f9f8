from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VehicleCreateRequest(BaseModel):
    make: str
    model: str
    license_plate: str
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    color: Optional[str] = None
    state: Optional[str] = None
    is_default: bool = False


class VehicleUpdateRequest(BaseModel):
    make: Optional[str] = None
    model: Optional[str] = None
    license_plate: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    color: Optional[str] = None
    state: Optional[str] = None
    is_default: Optional[bool] = None


class VehicleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    make: str
    model: str
    year: Optional[int] = None
    color: Optional[str] = None
    license_plate: str
    state: Optional[str] = None
    is_default: bool
    created_at: datetime
    updated_at: datetime
