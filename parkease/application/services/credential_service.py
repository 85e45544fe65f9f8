from __future__ import annotations

import logging
from typing import Optional

from passlib.context import CryptContext

from ...domain.errors import InvalidCredentials
from ...domain.models import SessionUser, build_session_user
from ...domain.ports.persistence import UserRepository

logger = logging.getLogger(__name__)


def default_password_context() -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto")


class CredentialVerifier:
    """Checks an email/password pair against the stored bcrypt hash."""

    def __init__(self, users: UserRepository, pwd_context: Optional[CryptContext] = None) -> None:
        self._users = users
        self._pwd = pwd_context or default_password_context()

    def hash_password(self, password: str) -> str:
        return self._pwd.hash(password)

    def verify(self, email: str, password: str) -> SessionUser:
        user = self._users.get_user_by_email(email.strip().lower())
        if user is None or not user.password_hash:
            # Burn the same time as a real comparison.
            self._pwd.dummy_verify()
            logger.info("Login rejected for unknown or password-less account")
            raise InvalidCredentials()
        try:
            matches = self._pwd.verify(password, user.password_hash)
        except (ValueError, UnicodeError):
            # Input bcrypt cannot encode never matches.
            matches = False
        if not matches:
            logger.info("Login rejected for user %s", user.id)
            raise InvalidCredentials()
        return build_session_user(user)
