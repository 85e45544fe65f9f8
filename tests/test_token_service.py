from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from threading import Barrier

import pytest

from parkease.application.services.token_service import TOKEN_TTL, TokenService, generate_token, hash_token
from parkease.domain.errors import TokenExpired, TokenNotFound
from parkease.domain.models import Role, TokenPurpose
from parkease.infrastructure.persistence.sqlite import SQLitePersistence

NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def test_generated_token_shape_and_hash_round_trip():
    issued = generate_token(NOW)

    assert len(issued.raw_token) == 64
    int(issued.raw_token, 16)
    assert issued.hashed_token == hash_token(issued.raw_token)
    assert issued.hashed_token != issued.raw_token
    assert issued.expiry == NOW + TOKEN_TTL


def test_tokens_are_unique():
    assert len({generate_token(NOW).raw_token for _ in range(50)}) == 50


def test_issue_persists_only_the_hash(token_service, store, clock, alice):
    issued = token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)

    [stored] = store.stored_tokens()
    assert stored.token_hash == hash_token(issued.raw_token)
    assert stored.token_hash != issued.raw_token
    assert stored.expires_at == clock() + TOKEN_TTL
    assert stored.user_id == alice.id


def test_token_verifies_exactly_once(token_service, clock, alice):
    issued = token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)

    clock.advance(minutes=30)
    user = token_service.verify(issued.raw_token, TokenPurpose.MAGIC_LINK)
    assert user.id == alice.id

    clock.advance(minutes=1)
    with pytest.raises(TokenNotFound):
        token_service.verify(issued.raw_token, TokenPurpose.MAGIC_LINK)


def test_expired_token_is_rejected_then_gone(token_service, clock, alice):
    issued = token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)

    clock.advance(minutes=61)
    with pytest.raises(TokenExpired):
        token_service.verify(issued.raw_token, TokenPurpose.MAGIC_LINK)
    with pytest.raises(TokenNotFound):
        token_service.verify(issued.raw_token, TokenPurpose.MAGIC_LINK)


def test_token_expires_exactly_at_the_boundary(token_service, clock, alice):
    issued = token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)

    clock.advance(hours=1)
    with pytest.raises(TokenExpired):
        token_service.verify(issued.raw_token, TokenPurpose.MAGIC_LINK)


def test_unknown_and_empty_tokens(token_service, alice):
    token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)

    with pytest.raises(TokenNotFound):
        token_service.verify("0" * 64, TokenPurpose.MAGIC_LINK)
    with pytest.raises(TokenNotFound):
        token_service.verify("", TokenPurpose.MAGIC_LINK)


def test_token_is_bound_to_its_purpose(token_service, alice):
    issued = token_service.issue(alice.id, TokenPurpose.PASSWORD_RESET)

    with pytest.raises(TokenNotFound):
        token_service.verify(issued.raw_token, TokenPurpose.MAGIC_LINK)
    assert token_service.verify(issued.raw_token, TokenPurpose.PASSWORD_RESET).id == alice.id


def test_reissuing_replaces_the_previous_token(token_service, alice):
    first = token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)
    second = token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)

    with pytest.raises(TokenNotFound):
        token_service.verify(first.raw_token, TokenPurpose.MAGIC_LINK)
    assert token_service.verify(second.raw_token, TokenPurpose.MAGIC_LINK).id == alice.id


def _race(service, raw_token, attempts=8):
    barrier = Barrier(attempts)

    def attempt(_):
        barrier.wait()
        try:
            service.verify(raw_token, TokenPurpose.MAGIC_LINK)
            return "ok"
        except TokenNotFound:
            return "not_found"

    with ThreadPoolExecutor(max_workers=attempts) as pool:
        return list(pool.map(attempt, range(attempts)))


def test_concurrent_verification_succeeds_once(token_service, alice):
    issued = token_service.issue(alice.id, TokenPurpose.MAGIC_LINK)

    results = _race(token_service, issued.raw_token)

    assert results.count("ok") == 1
    assert results.count("not_found") == len(results) - 1


def test_concurrent_verification_against_sqlite(tmp_path, clock):
    persistence = SQLitePersistence(tmp_path / "race.db")
    try:
        user = persistence.create_user(
            email="race@example.com",
            password_hash=None,
            first_name="Race",
            last_name="Condition",
            role=Role.CUSTOMER,
        )
        service = TokenService(persistence, persistence, clock=clock)
        issued = service.issue(user.id, TokenPurpose.MAGIC_LINK)

        results = _race(service, issued.raw_token)

        assert results.count("ok") == 1
    finally:
        persistence.close()


def test_sqlite_keeps_expiry_precision(tmp_path, clock):
    persistence = SQLitePersistence(tmp_path / "tokens.db")
    try:
        user = persistence.create_user(
            email="p@example.com", password_hash=None, first_name="P", last_name="Q"
        )
        service = TokenService(persistence, persistence, clock=clock)
        issued = service.issue(user.id, TokenPurpose.EMAIL_VERIFICATION)

        clock.advance(minutes=59, seconds=59)
        assert service.verify(issued.raw_token, TokenPurpose.EMAIL_VERIFICATION).id == user.id
    finally:
        persistence.close()
