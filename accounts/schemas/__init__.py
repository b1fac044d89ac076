"""Pydantic request/response schemas."""

from accounts.schemas.auth import (
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    PerformResetRequest,
    RegisterRequest,
    ResetClaims,
    SessionClaims,
    TokenResponse,
    UserListItem,
)
from accounts.schemas.health import HealthResponse

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordResetRequest",
    "PerformResetRequest",
    "RegisterRequest",
    "ResetClaims",
    "SessionClaims",
    "TokenResponse",
    "UserListItem",
]
