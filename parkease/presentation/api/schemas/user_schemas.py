"""Pydantic schemas for profile endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ....domain.models import User


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class ProfileResponse(BaseModel):
    """Response schema for the user profile."""

    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    email_verified: bool
    is_guest: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "ProfileResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            avatar=user.avatar,
            role=user.role.value,
            email_verified=user.email_verified,
            is_guest=user.is_guest,
            created_at=user.created_at,
        )
