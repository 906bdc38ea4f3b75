"""
Administrator authentication.

A single administrator logs in with the username/password pair configured in
the environment and receives a signed token valid for TOKEN_TTL_SECONDS.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import jwt

from newsdesk.core.config import Settings, get_settings
from newsdesk.core.security import constant_time_equals, decode_token, generate_secret, issue_token

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class InvalidCredentialsError(AuthError):
    pass


class TokenInvalidError(AuthError):
    pass


@dataclass
class AdminAuthService:
    """Checks admin credentials and mints/verifies admin tokens."""

    settings: Settings = field(default_factory=get_settings)

    def __post_init__(self):
        self._secret = self.settings.jwt_secret
        if not self._secret:
            logger.warning("JWT_SECRET is not set; using a random secret, tokens will not survive a restart")
            self._secret = generate_secret()
        if not (self.settings.admin_username and self.settings.admin_password):
            logger.warning("ADMIN_USERNAME/ADMIN_PASSWORD are not set; admin login is disabled")

    def _credentials_match(self, username: str, password: str) -> bool:
        expected_user = self.settings.admin_username
        expected_password = self.settings.admin_password
        if not (expected_user and expected_password):
            return False
        # evaluate both so timing does not reveal which field was wrong
        user_ok = constant_time_equals(username, expected_user)
        password_ok = constant_time_equals(password, expected_password)
        return user_ok and password_ok

    def login(self, username: str | None, password: str | None) -> str:
        if not self._credentials_match(username or "", password or ""):
            raise InvalidCredentialsError("Invalid credentials")
        logger.info("Admin login succeeded for %s", username)
        return issue_token({"username": username}, self._secret, self.settings.token_ttl_seconds)

    def verify(self, token: str | None) -> dict:
        if not token:
            raise TokenInvalidError("Missing token")
        try:
            return decode_token(token, self._secret)
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(str(exc)) from exc
