"""Account service: registration, login, deletion, listing, session re-issue and password reset."""

import asyncio
import logging
import re

from accounts.core.errors import (
    ConflictError,
    DeliveryError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from accounts.core.security import (
    BCRYPT_ROUNDS,
    DEFAULT_ROLE,
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    ROLE_MAX_LEN,
    hash_password,
    verify_password,
)
from accounts.core.tokens import ResetTokenCodec, SessionTokenCodec
from accounts.models import User
from accounts.schemas.auth import SessionClaims
from accounts.services.directory import UserDirectory
from accounts.services.notifier import NotificationSink

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")

# Both login failure reasons map to this message; the reason is only logged.
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


def _require(value: str | None) -> bool:
    return value is not None and value.strip() != ""


class AccountService:
    """
    Stateless orchestrator over the user directory, hasher, token codecs and notification sink.

    All collaborators and settings are passed in; nothing is read from module
    globals. Reset tokens are not persisted, so a token can be replayed until
    it expires.
    """

    def __init__(
        self,
        directory: UserDirectory,
        session_codec: SessionTokenCodec,
        reset_codec: ResetTokenCodec,
        notifier: NotificationSink | None,
        reset_link_base: str,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        delivery_timeout: float = 15.0,
    ) -> None:
        self._directory = directory
        self._session_codec = session_codec
        self._reset_codec = reset_codec
        self._notifier = notifier
        self._reset_link_base = reset_link_base
        self._bcrypt_rounds = bcrypt_rounds
        self._delivery_timeout = delivery_timeout

    def _issue_session(self, user: User) -> str:
        return self._session_codec.issue(user.id, user.email, user.role, user.name)

    def register(
        self,
        email: str | None,
        password: str | None,
        name: str | None,
        role: str | None = None,
    ) -> str:
        """Create an account and return a session token."""
        if not (_require(email) and _require(password) and _require(name)):
            raise InvalidInputError("Email, password and name are required.")
        if len(email) > EMAIL_MAX_LEN or not _EMAIL_RE.match(email):
            raise InvalidInputError("Invalid email.")
        if len(password) > PASSWORD_MAX_LEN:
            raise InvalidInputError("Invalid password length.")
        if len(name) > NAME_MAX_LEN:
            raise InvalidInputError("Invalid name length.")
        role = role.strip() if _require(role) else DEFAULT_ROLE
        if len(role) > ROLE_MAX_LEN:
            raise InvalidInputError("Invalid role.")

        if self._directory.find_by_email(email) is not None:
            raise ConflictError("A user with this email already exists.")
        user = self._directory.create(
            email=email,
            password_hash=hash_password(password, rounds=self._bcrypt_rounds),
            role=role,
            name=name,
        )
        logger.info("User registered", extra={"user_id": user.id, "role": user.role})
        return self._issue_session(user)

    def login(self, email: str | None, password: str | None) -> str:
        """Verify credentials and return a session token."""
        if not (_require(email) and password):
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        user = self._directory.find_by_email(email)
        if user is None:
            logger.info("Login failed", extra={"reason": "user_not_found"})
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        if not verify_password(password, user.password_hash):
            logger.info("Login failed", extra={"reason": "bad_password", "user_id": user.id})
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        return self._issue_session(user)

    def verify_session(self, token: str | None) -> SessionClaims:
        """Decode a bearer token. Raises InvalidTokenError if it is forged, expired or not a session token."""
        return self._session_codec.verify(token or "")

    def delete_self(self, authenticated_id: int) -> None:
        """Delete the account of the authenticated user. Raises NotFoundError if it no longer exists."""
        self._directory.delete(authenticated_id)
        logger.info("User deleted", extra={"user_id": authenticated_id})

    def list_all(self) -> list[User]:
        return self._directory.list_all()

    def reissue_session(self, claims: SessionClaims) -> str:
        """Issue a fresh session token with the same claims (token refresh)."""
        return self._session_codec.issue(claims.id, claims.email, claims.role, claims.name)

    def build_reset_link(self, token: str) -> str:
        return f"{self._reset_link_base}{token}"

    async def request_reset(self, email: str | None) -> None:
        """
        Email a reset link for the account.

        Raises NotFoundError if no user has this email, DeliveryError if the
        sink is not configured, fails, or exceeds the delivery timeout.
        """
        if not _require(email):
            raise InvalidInputError("Email is required.")
        user = self._directory.find_by_email(email)
        if user is None:
            raise NotFoundError("No user with this email.")
        if self._notifier is None:
            logger.error("Password reset requested but email delivery is not configured")
            raise DeliveryError("Email delivery is not configured.")

        token = self._reset_codec.issue(user.id, user.email)
        link = self.build_reset_link(token)
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._notifier.send_password_reset, user.email, link),
                timeout=self._delivery_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(
                "Password reset email timed out",
                extra={"user_id": user.id, "timeout_sec": self._delivery_timeout},
            )
            raise DeliveryError("Timed out sending password reset email.") from e
        except DeliveryError:
            raise
        except Exception as e:
            logger.exception("Password reset email failed", extra={"user_id": user.id})
            raise DeliveryError("Failed to send password reset email.") from e
        logger.info("Password reset requested", extra={"user_id": user.id})

    def perform_reset(self, token: str | None, new_password: str | None) -> None:
        """Replace the password of the user named by a valid reset token."""
        if not (_require(token) and _require(new_password)):
            raise InvalidInputError("Token and new password are required.")
        if len(new_password) > PASSWORD_MAX_LEN:
            raise InvalidInputError("Invalid password length.")
        claims = self._reset_codec.verify(token)
        user = self._directory.find_by_id_and_email(claims.id, claims.email)
        if user is None:
            raise NotFoundError("User not found.")
        user.password_hash = hash_password(new_password, rounds=self._bcrypt_rounds)
        self._directory.save(user)
        logger.info("Password reset performed", extra={"user_id": user.id})
