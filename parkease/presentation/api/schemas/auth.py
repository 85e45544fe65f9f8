"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from ....domain.models import SessionUser, User


class RegisterRequest(BaseModel):
    """Request schema for customer registration."""

    first_name: str
    last_name: str
    email: EmailStr
    password: str
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class EmailRequest(BaseModel):
    email: EmailStr


class MagicLinkRequest(BaseModel):
    """Request schema for passwordless sign-in."""

    email: EmailStr
    return_url: Optional[str] = Field(default=None, alias="returnUrl")

    model_config = {"populate_by_name": True}


class ResetPasswordRequest(BaseModel):
    token: str
    password: str


class MessageResponse(BaseModel):
    message: str


class SessionUserResponse(BaseModel):
    """The authenticated identity. Role is always lower case."""

    id: int
    email: str
    role: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    email_verified: bool

    @classmethod
    def from_session(cls, session: SessionUser) -> "SessionUserResponse":
        return cls(
            id=session.id,
            email=session.email,
            role=session.role.value,
            first_name=session.first_name,
            last_name=session.last_name,
            phone=session.phone,
            avatar=session.avatar,
            email_verified=session.email_verified,
        )


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: SessionUserResponse


class RegisterResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: str
    email_verified: bool
    created_at: datetime
    message: str

    @classmethod
    def from_user(cls, user: User, message: str) -> "RegisterResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            role=user.role.value,
            email_verified=user.email_verified,
            created_at=user.created_at,
            message=message,
        )
