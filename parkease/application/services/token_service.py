"""Issuing and verifying single-use authentication tokens."""

from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from ...domain.errors import TokenExpired, TokenNotFound
from ...domain.models import IssuedToken, TokenPurpose, User
from ...domain.ports.persistence import TokenRepository, UserRepository

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
TOKEN_TTL = timedelta(hours=1)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def hash_token(raw_token: str) -> str:
    """Hash a raw token using SHA-256.

    Tokens carry 256 bits of entropy, so a fast digest is enough; no salt
    or key stretching is needed.
    """
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def generate_token(now: datetime) -> IssuedToken:
    raw_token = secrets.token_hex(TOKEN_BYTES)
    return IssuedToken(raw_token=raw_token, hashed_token=hash_token(raw_token), expiry=now + TOKEN_TTL)


class TokenService:
    """Issues hashed, time-bounded, single-use tokens and verifies them.

    A token moves from issued to either consumed (verified once) or
    expired. Verification removes the stored hash in the same step that
    finds it, so a token never verifies twice.
    """

    def __init__(
        self,
        tokens: TokenRepository,
        users: UserRepository,
        clock: Clock = utcnow,
    ) -> None:
        self._tokens = tokens
        self._users = users
        self._clock = clock

    def issue(self, user_id: int, purpose: TokenPurpose) -> IssuedToken:
        """
        Create a token for a user, replacing any previous one of the same purpose.

        Args:
            user_id: Owner of the token
            purpose: What the token may be used for

        Returns:
            IssuedToken whose ``raw_token`` must be delivered to the user.
            It is not stored anywhere.
        """
        issued = generate_token(self._clock())
        self._tokens.save_token(user_id, purpose, issued.hashed_token, issued.expiry)
        logger.info("Issued %s token for user %s (expires %s)", purpose.value, user_id, issued.expiry.isoformat())
        return issued

    def verify(self, raw_token: str, purpose: TokenPurpose) -> User:
        """
        Consume a presented token and return its user.

        Raises:
            TokenNotFound: Unknown token, wrong purpose, or already consumed
            TokenExpired: Token matched but its window has elapsed
        """
        if not raw_token:
            raise TokenNotFound()
        stored = self._tokens.consume_token(hash_token(raw_token), purpose)
        if stored is None:
            logger.info("Rejected unknown %s token", purpose.value)
            raise TokenNotFound()

        if self._clock() >= stored.expires_at:
            logger.info("Rejected expired %s token for user %s", purpose.value, stored.user_id)
            raise TokenExpired()

        user = self._users.get_user_by_id(stored.user_id)
        if user is None:
            raise TokenNotFound()
        return user
