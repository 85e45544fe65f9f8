from concurrent.futures import ThreadPoolExecutor
from threading import Barrier
from urllib.parse import parse_qs, urlparse

import pytest

from parkease.application.services.auth_service import AuthService
from parkease.application.services.credential_service import CredentialVerifier
from parkease.application.services.token_service import TokenService
from parkease.domain.errors import EmailAlreadyRegistered, InvalidCredentials, NotFound, TokenExpired, TokenNotFound
from parkease.domain.models import Role, TokenPurpose
from parkease.infrastructure.persistence.sqlite import SQLitePersistence


def _token_from(url):
    return parse_qs(urlparse(url).query)["token"][0]


def test_register_creates_unverified_customer_and_emails_link(auth_service, mailer, store):
    user = auth_service.register("Dana", "Driver", "Dana@Example.com", "long-enough", phone="+1555")

    assert user.email == "dana@example.com"
    assert user.role is Role.CUSTOMER
    assert user.email_verified is False
    assert user.password_hash != "long-enough"
    assert mailer.sent[-1][0] == "dana@example.com"
    assert mailer.last_url().startswith("http://frontend.test/auth/verify-email?token=")
    assert store.stored_tokens()[0].purpose is TokenPurpose.EMAIL_VERIFICATION


def test_register_rejects_duplicates_and_short_passwords(auth_service, alice):
    with pytest.raises(EmailAlreadyRegistered):
        auth_service.register("A", "W", "alice@example.com", "long-enough")
    with pytest.raises(ValueError):
        auth_service.register("B", "C", "b@example.com", "short")
    with pytest.raises(ValueError):
        auth_service.register(" ", "C", "b@example.com", "long-enough")


def test_verify_email_consumes_the_link(auth_service, mailer):
    auth_service.register("Dana", "Driver", "dana@example.com", "long-enough")
    token = _token_from(mailer.last_url())

    assert auth_service.verify_email(token).email_verified is True
    with pytest.raises(TokenNotFound):
        auth_service.verify_email(token)


def test_resend_verification(auth_service, mailer, alice):
    with pytest.raises(NotFound):
        auth_service.resend_verification("ghost@example.com")
    with pytest.raises(ValueError):
        auth_service.resend_verification("alice@example.com")

    auth_service.register("Dana", "Driver", "dana@example.com", "long-enough")
    first = _token_from(mailer.last_url())
    auth_service.resend_verification("dana@example.com")
    second = _token_from(mailer.last_url())

    with pytest.raises(TokenNotFound):
        auth_service.verify_email(first)
    assert auth_service.verify_email(second).email_verified is True


def test_password_reset_flow(auth_service, mailer, alice):
    auth_service.request_password_reset("alice@example.com")
    token = _token_from(mailer.last_url())
    assert "/auth/reset-password" in mailer.last_url()

    auth_service.reset_password(token, "brand new secret")

    assert auth_service.login("alice@example.com", "brand new secret").id == alice.id
    with pytest.raises(InvalidCredentials):
        auth_service.login("alice@example.com", "correct horse")
    with pytest.raises(TokenNotFound):
        auth_service.reset_password(token, "another secret")


def test_password_reset_for_unknown_email_is_silent(auth_service, mailer):
    auth_service.request_password_reset("ghost@example.com")
    assert mailer.sent == []


def test_expired_reset_token(auth_service, mailer, clock, alice):
    auth_service.request_password_reset("alice@example.com")
    clock.advance(minutes=90)

    with pytest.raises(TokenExpired):
        auth_service.reset_password(_token_from(mailer.last_url()), "brand new secret")


def test_magic_link_creates_guest_and_signs_in_once(auth_service, mailer, store):
    auth_service.request_magic_link("Guest@Example.com", return_url="/checkout?spot=4")

    guest = store.get_user_by_email("guest@example.com")
    assert guest.is_guest and guest.password_hash is None and guest.email_verified
    url = mailer.last_url()
    assert url.startswith("http://frontend.test/auth/magic-link?")
    assert parse_qs(urlparse(url).query)["returnUrl"] == ["/checkout?spot=4"]

    session = auth_service.login_with_magic_link(_token_from(url))
    assert session.id == guest.id
    assert session.role is Role.CUSTOMER
    with pytest.raises(TokenNotFound):
        auth_service.login_with_magic_link(_token_from(url))


def test_magic_link_for_existing_user_keeps_the_account(auth_service, mailer, alice):
    auth_service.request_magic_link("alice@example.com")

    session = auth_service.login_with_magic_link(_token_from(mailer.last_url()))

    assert session.id == alice.id
    assert session.role is Role.OWNER


def test_change_password(auth_service, alice):
    with pytest.raises(ValueError):
        auth_service.change_password(alice.id, "wrong", "brand new secret")

    auth_service.change_password(alice.id, "correct horse", "brand new secret")

    assert auth_service.login("alice@example.com", "brand new secret").id == alice.id


def test_ensure_default_admin_is_idempotent(auth_service, store):
    assert auth_service.ensure_default_admin(None, None) is None

    admin = auth_service.ensure_default_admin("Root@Example.com", "admin-password")
    again = auth_service.ensure_default_admin("root@example.com", "admin-password")

    assert admin.role is Role.ADMIN
    assert again.id == admin.id
    assert auth_service.login("root@example.com", "admin-password").role is Role.ADMIN


@pytest.mark.parametrize("password", ["long-enough\ud800", "long\x00enough"])
def test_passwords_bcrypt_cannot_encode_are_rejected(auth_service, mailer, alice, password):
    with pytest.raises(ValueError):
        auth_service.register("B", "C", "b@example.com", password)
    with pytest.raises(ValueError):
        auth_service.change_password(alice.id, "correct horse", password)

    auth_service.request_password_reset("alice@example.com")
    with pytest.raises(ValueError):
        auth_service.reset_password(_token_from(mailer.last_url()), password)


def test_concurrent_registration_of_one_email_conflicts(tmp_path, pwd_context, clock, mailer):
    persistence = SQLitePersistence(tmp_path / "signup.db")
    service = AuthService(
        persistence,
        CredentialVerifier(persistence, pwd_context),
        TokenService(persistence, persistence, clock=clock),
        mailer,
    )
    barrier = Barrier(2)

    def attempt(_):
        barrier.wait()
        try:
            service.register("Dana", "Driver", "same@example.com", "long-enough")
            return "ok"
        except EmailAlreadyRegistered:
            return "conflict"

    try:
        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(attempt, range(2)))
    finally:
        persistence.close()

    assert sorted(results) == ["conflict", "ok"]


def test_sqlite_reports_taken_email_as_conflict(tmp_path):
    persistence = SQLitePersistence(tmp_path / "users.db")
    try:
        persistence.create_user("dup@example.com", None, "A", "B")
        with pytest.raises(EmailAlreadyRegistered):
            persistence.create_user("DUP@example.com", None, "C", "D")
    finally:
        persistence.close()


def test_magic_link_reuses_account_created_after_lookup(auth_service, mailer, store, alice, monkeypatch):
    lookups = []
    original = store.get_user_by_email

    def lookup(email):
        lookups.append(email)
        # The first lookup misses, as if the account appeared just after it.
        return None if len(lookups) == 1 else original(email)

    monkeypatch.setattr(store, "get_user_by_email", lookup)

    auth_service.request_magic_link("alice@example.com")

    assert mailer.sent[-1][0] == "alice@example.com"
    assert auth_service.login_with_magic_link(_token_from(mailer.last_url())).id == alice.id
