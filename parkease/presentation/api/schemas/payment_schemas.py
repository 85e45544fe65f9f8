from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentMethodCreateRequest(BaseModel):
    brand: str
    last4: str = Field(min_length=4, max_length=4)
    expiry_month: int
    expiry_year: int
    cardholder_name: Optional[str] = None
    set_as_default: bool = False


class PaymentMethodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand: str
    last4: str
    expiry_month: int
    expiry_year: int
    cardholder_name: Optional[str] = None
    is_default: bool
    created_at: datetime
