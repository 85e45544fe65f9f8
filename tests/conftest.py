import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext

from parkease.application.services.auth_service import AuthService
from parkease.application.services.credential_service import CredentialVerifier
from parkease.application.services.token_service import TokenService
from parkease.core.app_factory import create_application
from parkease.domain.errors import EmailAlreadyRegistered
from parkease.domain.models import Role, StoredToken, TokenPurpose, User
from parkease.services.email_service import EmailService

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryStore:
    """User and token store kept in dictionaries, guarded by one lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._tokens: Dict[Tuple[int, TokenPurpose], StoredToken] = {}
        self._next_id = 1

    # users
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email.lower()), None)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def create_user(
        self,
        email,
        password_hash,
        first_name,
        last_name,
        phone=None,
        role=Role.CUSTOMER,
        email_verified=False,
        is_guest=False,
    ) -> User:
        now = datetime.now(timezone.utc)
        with self._lock:
            if any(u.email == email.lower() for u in self._users.values()):
                raise EmailAlreadyRegistered()
            user = User(
                id=self._next_id,
                email=email.lower(),
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
                avatar=None,
                role=role,
                email_verified=email_verified,
                is_guest=is_guest,
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            self._next_id += 1
        return user

    def update_user_profile(self, user_id, *, first_name=None, last_name=None, phone=None, avatar=None):
        changes = {
            key: value
            for key, value in (
                ("first_name", first_name),
                ("last_name", last_name),
                ("phone", phone),
                ("avatar", avatar),
            )
            if value is not None
        }
        return self._update(user_id, **changes)

    def update_user_password(self, user_id, password_hash):
        return self._update(user_id, password_hash=password_hash)

    def mark_email_verified(self, user_id):
        return self._update(user_id, email_verified=True)

    def _update(self, user_id, **changes) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            user = replace(user, updated_at=datetime.now(timezone.utc), **changes)
            self._users[user_id] = user
            return user

    # tokens
    def save_token(self, user_id, purpose, token_hash, expires_at) -> None:
        with self._lock:
            self._tokens[(user_id, purpose)] = StoredToken(user_id, purpose, token_hash, expires_at)

    def consume_token(self, token_hash, purpose) -> Optional[StoredToken]:
        with self._lock:
            for key, stored in self._tokens.items():
                if stored.token_hash == token_hash and stored.purpose == purpose:
                    return self._tokens.pop(key)
        return None

    def stored_tokens(self) -> List[StoredToken]:
        with self._lock:
            return list(self._tokens.values())


class RecordingEmailService(EmailService):
    def __init__(self) -> None:
        super().__init__(base_url="http://frontend.test")
        self.sent: List[Tuple[str, str, str]] = []

    def _send_link(self, to_email, subject, heading, intro, button, url) -> bool:
        self.sent.append((to_email, subject, url))
        return True

    def last_url(self) -> str:
        return self.sent[-1][2]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def pwd_context() -> CryptContext:
    return CryptContext(schemes=["bcrypt"], bcrypt__rounds=4)


@pytest.fixture
def verifier(store, pwd_context) -> CredentialVerifier:
    return CredentialVerifier(store, pwd_context)


@pytest.fixture
def token_service(store, clock) -> TokenService:
    return TokenService(store, store, clock=clock)


@pytest.fixture
def mailer() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def auth_service(store, verifier, token_service, mailer) -> AuthService:
    return AuthService(store, verifier, token_service, mailer)


@pytest.fixture
def alice(store, verifier) -> User:
    return store.create_user(
        email="alice@example.com",
        password_hash=verifier.hash_password("correct horse"),
        first_name="Alice",
        last_name="Walker",
        phone="+15550100",
        role=Role.OWNER,
        email_verified=True,
    )


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "parkease.db"))
    monkeypatch.setenv("SESSION_TOKEN_SECRET", "test-secret")
    for key in ("SMTP_HOST", "SMTP_USERNAME", "SMTP_FROM_EMAIL", "ADMIN_EMAIL", "ADMIN_PASSWORD"):
        monkeypatch.delenv(key, raising=False)
    app = create_application()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def container(client):
    return client.app.state.container


def register_and_login(client, email="driver@example.com", password="s3cret-pass"):
    response = client.post(
        "/api/auth/register",
        json={"first_name": "Dana", "last_name": "Driver", "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['access_token']}"}


@pytest.fixture
def signed_in(client):
    """Register a customer through the API and return ``(user, auth_headers)``."""

    def _signed_in(email="driver@example.com", password="s3cret-pass"):
        return register_and_login(client, email, password)

    return _signed_in
