from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ....domain.models import BookingStatus


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    location_id: Optional[int] = None
    location_name: str
    location_address: Optional[str] = None
    check_in: datetime
    check_out: datetime
    status: BookingStatus
    total_price: float
    confirmation_code: str
    vehicle_plate: Optional[str] = None
    created_at: datetime
