from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from ...domain.errors import Unauthorized
from ...domain.models import SessionUser

logger = logging.getLogger(__name__)


class SessionService:
    """Signs session projections into bearer tokens and reads them back."""

    def __init__(
        self,
        secret_key: str,
        token_exp_minutes: int = 1440,
        algorithm: str = "HS256",
    ) -> None:
        if not secret_key:
            raise RuntimeError("SESSION_TOKEN_SECRET is not configured.")
        if secret_key == "change-me":
            logger.warning(
                "SESSION_TOKEN_SECRET is using the default value. Configure a real secret in production."
            )
        self._secret_key = secret_key
        self._token_exp_minutes = token_exp_minutes
        self._algorithm = algorithm

    @property
    def expires_in(self) -> int:
        return self._token_exp_minutes * 60

    def create_token(self, session_user: SessionUser) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = session_user.to_claims()
        payload["iat"] = now
        payload["exp"] = now + timedelta(minutes=self._token_exp_minutes)
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def resolve(self, token: str) -> SessionUser:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as exc:
            raise Unauthorized("Invalid or expired session token.") from exc
        try:
            return SessionUser.from_claims(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise Unauthorized("Invalid or expired session token.") from exc
