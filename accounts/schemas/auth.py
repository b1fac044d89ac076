"""Request/response schemas for user account endpoints and decoded token claims."""

from datetime import datetime

from pydantic import BaseModel, Field

# Request fields are optional at the schema level; the account service reports
# missing values as InvalidInput (400) with a single message.


class RegisterRequest(BaseModel):
    """Body for POST /user/registration."""

    email: str | None = Field(default=None, description="Unique email (case-sensitive)")
    password: str | None = Field(default=None, description="Plain-text password")
    role: str | None = Field(default=None, description="Role tag; defaults to USER")
    name: str | None = Field(default=None, description="Display name")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, description="Email")
    password: str | None = Field(default=None, description="Password")


class PasswordResetRequest(BaseModel):
    """Body for POST /user/requestPasswordReset."""

    email: str | None = Field(default=None, description="Email of the account to reset")


class PerformResetRequest(BaseModel):
    """Body for POST /user/resetPassword (JSON or form). Accepts newPassword or new_password."""

    token: str | None = Field(default=None, description="Reset token from the emailed link")
    new_password: str | None = Field(default=None, alias="newPassword", description="New password")

    class Config:
        populate_by_name = True


class TokenResponse(BaseModel):
    """Session token returned by registration, login and re-issue."""

    token: str = Field(..., description="JWT session token")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class SessionClaims(BaseModel):
    """Identity claims carried by a verified session token."""

    id: int
    email: str
    role: str
    name: str


class ResetClaims(BaseModel):
    """Claims carried by a verified password-reset token."""

    id: int
    email: str


class UserListItem(BaseModel):
    """User entry for GET /user/ (no password hash)."""

    id: int
    email: str
    role: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
