"""User domain model for customer, owner and staff accounts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Closed set of account roles.

    Values are lower-case; the store persists the upper-case member name.
    """

    CUSTOMER = "customer"
    OWNER = "owner"
    WATCHMAN = "watchman"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str) -> "Role":
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError) as exc:
            raise ValueError(f"Unknown role: {value!r}") from exc


@dataclass(slots=True)
class User:
    """
    User entity as stored by the persistence gateway.

    Attributes:
        id: Unique identifier
        email: User email address (unique, lower-cased)
        password_hash: bcrypt hash, ``None`` for guest accounts
        first_name: Given name
        last_name: Family name
        phone: Contact number
        avatar: Avatar URL
        role: Account role
        email_verified: Whether the email address has been confirmed
        is_guest: Created through passwordless checkout
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    email: str
    password_hash: Optional[str]
    first_name: str
    last_name: str
    phone: Optional[str]
    avatar: Optional[str]
    role: Role
    email_verified: bool
    is_guest: bool
    created_at: datetime
    updated_at: datetime

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role.value} verified={self.email_verified}>"
