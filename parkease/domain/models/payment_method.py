"""Saved card metadata. No card numbers or processor tokens are kept."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class PaymentMethod:
    id: int
    user_id: int
    brand: str
    last4: str
    expiry_month: int
    expiry_year: int
    cardholder_name: Optional[str]
    is_default: bool
    created_at: datetime
    updated_at: datetime
