"""Stateless authentication stubs.

There is no credential store: any non-empty username/password pair logs in
as the demo administrator, and password reset requests always report
success without revealing whether the address exists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..utils.identifiers import Clock, epoch_millis, utc_now

__all__ = [
    "AuthResponse",
    "AuthUser",
    "LoginCredentials",
    "MOCK_ADMIN",
    "login",
    "request_password_reset",
]

LOGGER = logging.getLogger(__name__)

MSG_LOGIN_OK = "Login successful"
MSG_LOGIN_MISSING = "Username/email and password are required"
MSG_RESET_SENT = "If this email exists, you will receive a password reset link shortly."


@dataclass(slots=True, frozen=True)
class LoginCredentials:
    username_or_email: str
    password: str


@dataclass(slots=True, frozen=True)
class AuthUser:
    id: str
    name: str
    email: str
    role: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}


MOCK_ADMIN = AuthUser(id="1", name="Admin User", email="admin@istudent.com", role="admin")


@dataclass(slots=True)
class AuthResponse:
    """Result of an auth call; ``http_status`` mirrors the endpoint status code."""

    success: bool
    message: str
    http_status: int = 200
    user: AuthUser | None = None
    token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.user is not None:
            payload["user"] = self.user.to_dict()
        if self.token is not None:
            payload["token"] = self.token
        return payload


def login(credentials: LoginCredentials, *, clock: Clock | None = None) -> AuthResponse:
    if not (credentials.username_or_email or "").strip() or not credentials.password:
        LOGGER.info("Rejected login with missing credentials")
        return AuthResponse(success=False, message=MSG_LOGIN_MISSING, http_status=400)
    stamp = epoch_millis((clock or utc_now)())
    LOGGER.debug("Mock login accepted for %s", credentials.username_or_email)
    return AuthResponse(
        success=True,
        message=MSG_LOGIN_OK,
        http_status=200,
        user=MOCK_ADMIN,
        token=f"mock-token-{stamp}",
    )


def request_password_reset(email: str) -> AuthResponse:
    LOGGER.debug("Password reset requested")
    return AuthResponse(success=True, message=MSG_RESET_SENT, http_status=200)
