"""Typed failures surfaced by the application services.

Each error carries the HTTP status and default message the presentation
layer renders for it.
"""

from __future__ import annotations

from typing import Optional


class ParkEaseError(Exception):
    status_code = 500
    default_detail = "Internal server error."
    default_code = "error"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidCredentials(ParkEaseError):
    """Unknown email or wrong password. The two cases are indistinguishable."""

    status_code = 401
    default_detail = "Invalid email or password."
    default_code = "invalid_credentials"


class TokenNotFound(ParkEaseError):
    """Unknown or already consumed token."""

    status_code = 400
    default_detail = "Invalid or already used token."
    default_code = "token_not_found"


class TokenExpired(ParkEaseError):
    status_code = 400
    default_detail = "Token has expired."
    default_code = "token_expired"


class Unauthorized(ParkEaseError):
    status_code = 401
    default_detail = "Authentication required."
    default_code = "unauthorized"


class NotFound(ParkEaseError):
    """Missing resource, or a resource owned by another user."""

    status_code = 404
    default_detail = "Not found."
    default_code = "not_found"


class EmailAlreadyRegistered(ParkEaseError):
    status_code = 409
    default_detail = "Email already registered."
    default_code = "email_already_registered"
