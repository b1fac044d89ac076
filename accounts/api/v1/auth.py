"""Auth dependencies: account service construction and bearer-token verification (get_current_claims)."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from accounts.core.config import Settings, get_settings
from accounts.core.database import get_db
from accounts.core.errors import InvalidTokenError, UnauthorizedError
from accounts.core.tokens import ResetTokenCodec, SessionTokenCodec
from accounts.schemas.auth import SessionClaims
from accounts.services.accounts import AccountService
from accounts.services.directory import UserDirectory
from accounts.services.notifier import NotificationSink, SmtpNotificationSink

security = HTTPBearer(auto_error=False)


def get_notification_sink(
    settings: Annotated[Settings, Depends(get_settings)],
) -> NotificationSink | None:
    """Dependency: SMTP sink from settings, or None when email is not configured."""
    return SmtpNotificationSink.from_settings(settings)


def get_account_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notifier: Annotated[NotificationSink | None, Depends(get_notification_sink)],
) -> AccountService:
    """Dependency: an AccountService bound to this request's DB session."""
    return AccountService(
        directory=UserDirectory(db),
        session_codec=SessionTokenCodec.from_settings(settings),
        reset_codec=ResetTokenCodec.from_settings(settings),
        notifier=notifier,
        reset_link_base=settings.reset_link_base,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
        delivery_timeout=settings.MAIL_SEND_TIMEOUT_SEC,
    )


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> SessionClaims:
    """Dependency: require a valid Bearer session token and return its claims. Raises 401 otherwise."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    try:
        return service.verify_session(credentials.credentials)
    except InvalidTokenError as e:
        raise UnauthorizedError("Invalid or expired token") from e
