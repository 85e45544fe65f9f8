"""Single-use authentication token models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TokenPurpose(str, Enum):
    MAGIC_LINK = "magic_link"
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """Freshly generated token.

    ``raw_token`` is handed to the user once; only ``hashed_token`` and
    ``expiry`` are ever persisted.
    """

    raw_token: str
    hashed_token: str
    expiry: datetime


@dataclass(frozen=True, slots=True)
class StoredToken:
    user_id: int
    purpose: TokenPurpose
    token_hash: str
    expires_at: datetime
