"""Authenticated identity carried for the life of a session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .user import Role, User


@dataclass(frozen=True, slots=True)
class SessionUser:
    """Read-only projection of a :class:`User` exposed to route handlers.

    Never holds the password hash or any token material.
    """

    id: int
    email: str
    role: Role
    first_name: str
    last_name: str
    phone: Optional[str]
    avatar: Optional[str]
    email_verified: bool

    def to_claims(self) -> Dict[str, Any]:
        return {
            "sub": str(self.id),
            "email": self.email,
            "role": self.role.value,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "avatar": self.avatar,
            "email_verified": self.email_verified,
        }

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "SessionUser":
        return cls(
            id=int(claims["sub"]),
            email=claims["email"],
            role=Role.parse(claims["role"]),
            first_name=claims.get("first_name") or "",
            last_name=claims.get("last_name") or "",
            phone=claims.get("phone"),
            avatar=claims.get("avatar"),
            email_verified=bool(claims.get("email_verified", False)),
        )


def build_session_user(user: User) -> SessionUser:
    assert user.id is not None and user.email, "user record is missing its identity"
    return SessionUser(
        id=user.id,
        email=user.email,
        role=Role.parse(user.role),
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        avatar=user.avatar,
        email_verified=user.email_verified,
    )
