"""Signed, time-limited JWTs: session tokens (identity claims, 24h) and reset tokens (id+email, 1h)."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt
from pydantic import ValidationError

from accounts.core.errors import InvalidTokenError
from accounts.schemas.auth import ResetClaims, SessionClaims

if TYPE_CHECKING:
    from accounts.core.config import Settings

SESSION_PURPOSE = "session"
RESET_PURPOSE = "password_reset"


class TokenCodec:
    """
    Sign and verify JWTs for one purpose with a fixed lifetime.

    The purpose is embedded as a claim and checked on decode, so tokens minted
    for one flow are rejected by the other even though they share a secret.
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta,
        purpose: str,
        algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ValueError("Token secret must be non-empty")
        self._secret = secret
        self._ttl = ttl
        self._purpose = purpose
        self._algorithm = algorithm

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def encode(self, claims: dict[str, Any], now: datetime | None = None) -> str:
        """Sign claims with iat/exp set from now (defaults to the current UTC time)."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims,
            "purpose": self._purpose,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """Return the payload of a valid token. Raises InvalidTokenError on any defect."""
        if not token or not isinstance(token, str):
            raise InvalidTokenError("Token is missing")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError("Token is invalid") from e
        if payload.get("purpose") != self._purpose:
            raise InvalidTokenError("Token is invalid")
        return payload


class SessionTokenCodec(TokenCodec):
    """Bearer tokens carrying id, email, role and name."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24), algorithm: str = "HS256") -> None:
        super().__init__(secret, ttl, SESSION_PURPOSE, algorithm)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SessionTokenCodec":
        return cls(
            settings.JWT_SECRET.get_secret_value(),
            timedelta(hours=settings.SESSION_TOKEN_EXPIRE_HOURS),
            settings.JWT_ALGORITHM,
        )

    def issue(
        self,
        user_id: int,
        email: str,
        role: str,
        name: str,
        now: datetime | None = None,
    ) -> str:
        return self.encode({"id": user_id, "email": email, "role": role, "name": name}, now=now)

    def verify(self, token: str) -> SessionClaims:
        payload = self.decode(token)
        try:
            return SessionClaims.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError("Token payload is invalid") from e


class ResetTokenCodec(TokenCodec):
    """Password-reset tokens carrying only id and email."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=1), algorithm: str = "HS256") -> None:
        super().__init__(secret, ttl, RESET_PURPOSE, algorithm)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ResetTokenCodec":
        return cls(
            settings.JWT_SECRET.get_secret_value(),
            timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
            settings.JWT_ALGORITHM,
        )

    def issue(self, user_id: int, email: str, now: datetime | None = None) -> str:
        return self.encode({"id": user_id, "email": email}, now=now)

    def verify(self, token: str) -> ResetClaims:
        payload = self.decode(token)
        try:
            return ResetClaims.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError("Token payload is invalid") from e
