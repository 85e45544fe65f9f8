from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import EmailAlreadyRegistered, InvalidCredentials, NotFound
from ...domain.models import Role, SessionUser, TokenPurpose, User, build_session_user
from ...domain.ports.persistence import UserRepository
from ...services.email_service import EmailService
from .credential_service import CredentialVerifier
from .token_service import TokenService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    """Coordinates sign-up, sign-in and token based account flows."""

    def __init__(
        self,
        users: UserRepository,
        credentials: CredentialVerifier,
        tokens: TokenService,
        email_service: EmailService,
    ) -> None:
        self._users = users
        self._credentials = credentials
        self._tokens = tokens
        self._email = email_service

    # ------------------------------------------------------------------
    def ensure_default_admin(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        if not email or not password:
            return None
        existing = self._users.get_user_by_email(email.lower())
        if existing:
            return existing
        logger.info("Creating default administrator account for %s", email)
        return self._users.create_user(
            email=email.lower(),
            password_hash=self._credentials.hash_password(password),
            first_name="Admin",
            last_name="",
            role=Role.ADMIN,
            email_verified=True,
        )

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
    ) -> User:
        email_clean = email.strip().lower()
        if not first_name.strip() or not last_name.strip() or not email_clean or not password:
            raise ValueError("All required fields are mandatory.")
        _check_password(password)
        if self._users.get_user_by_email(email_clean):
            raise EmailAlreadyRegistered()

        user = self._users.create_user(
            email=email_clean,
            password_hash=self._credentials.hash_password(password),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            phone=phone or None,
            role=Role.CUSTOMER,
        )
        issued = self._tokens.issue(user.id, TokenPurpose.EMAIL_VERIFICATION)
        if not self._email.send_verification_email(user.email, issued.raw_token):
            logger.warning("Verification email for user %s could not be sent", user.id)
        return user

    def login(self, email: str, password: str) -> SessionUser:
        return self._credentials.verify(email, password)

    def verify_email(self, token: str) -> User:
        user = self._tokens.verify(token, TokenPurpose.EMAIL_VERIFICATION)
        verified = self._users.mark_email_verified(user.id)
        if verified is None:
            raise NotFound("User not found.")
        return verified

    def resend_verification(self, email: str) -> None:
        user = self._users.get_user_by_email(email.strip().lower())
        if not user:
            raise NotFound("User not found.")
        if user.email_verified:
            raise ValueError("Email already verified.")
        issued = self._tokens.issue(user.id, TokenPurpose.EMAIL_VERIFICATION)
        self._email.send_verification_email(user.email, issued.raw_token)

    def request_password_reset(self, email: str) -> None:
        user = self._users.get_user_by_email(email.strip().lower())
        if not user:
            # Same outcome for unknown addresses.
            return
        issued = self._tokens.issue(user.id, TokenPurpose.PASSWORD_RESET)
        if not self._email.send_password_reset_email(user.email, issued.raw_token):
            logger.warning("Password reset email for user %s could not be sent", user.id)

    def reset_password(self, token: str, password: str) -> User:
        _check_password(password)
        user = self._tokens.verify(token, TokenPurpose.PASSWORD_RESET)
        updated = self._users.update_user_password(user.id, self._credentials.hash_password(password))
        if updated is None:
            raise NotFound("User not found.")
        logger.info("Password reset for user %s", user.id)
        return updated

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self._users.get_user_by_id(user_id)
        if user is None:
            raise NotFound("User not found.")
        try:
            self._credentials.verify(user.email, current_password)
        except InvalidCredentials as exc:
            raise ValueError("Current password is incorrect.") from exc
        _check_password(new_password)
        self._users.update_user_password(user_id, self._credentials.hash_password(new_password))

    def request_magic_link(self, email: str, return_url: Optional[str] = None) -> None:
        email_clean = email.strip().lower()
        if not email_clean:
            raise ValueError("Email is required.")
        user = self._users.get_user_by_email(email_clean) or self._create_guest(email_clean)
        issued = self._tokens.issue(user.id, TokenPurpose.MAGIC_LINK)
        link = self._email.build_link("/auth/magic-link", token=issued.raw_token, returnUrl=return_url)
        if not self._email.send_magic_link(user.email, link):
            logger.warning("Magic link for user %s could not be sent", user.id)

    def login_with_magic_link(self, token: str) -> SessionUser:
        user = self._tokens.verify(token, TokenPurpose.MAGIC_LINK)
        return build_session_user(user)

    def _create_guest(self, email: str) -> User:
        logger.info("Creating guest account for magic-link sign-in")
        try:
            return self._users.create_user(
                email=email,
                password_hash=None,
                first_name="Guest",
                last_name="User",
                role=Role.CUSTOMER,
                email_verified=True,
                is_guest=True,
            )
        except EmailAlreadyRegistered:
            # Another request created the account since the lookup.
            existing = self._users.get_user_by_email(email)
            if existing is None:
                raise
            return existing


def _check_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    try:
        password.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValueError("Password contains invalid characters.") from exc
    if "\x00" in password:
        raise ValueError("Password contains invalid characters.")
