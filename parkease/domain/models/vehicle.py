from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Vehicle:
    id: int
    user_id: int
    make: str
    model: str
    year: Optional[int]
    color: Optional[str]
    license_plate: str
    state: Optional[str]
    is_default: bool
    created_at: datetime
    updated_at: datetime
