"""User account endpoints: registration, login, re-issue, deletion, listing and password reset."""

import html
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from accounts.api.v1.auth import get_account_service, get_current_claims
from accounts.core.config import Settings, get_settings
from accounts.core.errors import InvalidInputError
from accounts.schemas.auth import (
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    PerformResetRequest,
    RegisterRequest,
    SessionClaims,
    TokenResponse,
    UserListItem,
)
from accounts.services.accounts import AccountService

router = APIRouter()

RESET_PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Reset Password</title>
</head>
<body>
    <h1>Reset password</h1>
    <form action="{action}" method="POST">
        <input type="hidden" name="token" value="{token}" />
        <label for="newPassword">New password:</label>
        <input type="password" id="newPassword" name="newPassword" required minlength="6" />
        <button type="submit">Reset password</button>
    </form>
</body>
</html>"""


@router.post("/registration", response_model=TokenResponse)
def register(
    body: RegisterRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> TokenResponse:
    """Create an account; returns a session token."""
    token = service.register(
        email=body.email, password=body.password, name=body.name, role=body.role
    )
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a session token.
    Include the token in the Authorization header as: Bearer <token>
    """
    return TokenResponse(token=service.login(body.email, body.password))


@router.get("/auth", response_model=TokenResponse)
def reissue(
    claims: Annotated[SessionClaims, Depends(get_current_claims)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> TokenResponse:
    """Return a fresh session token for the current (still valid) one."""
    return TokenResponse(token=service.reissue_session(claims))


@router.delete("/delete", status_code=status.HTTP_204_NO_CONTENT)
def delete_self(
    claims: Annotated[SessionClaims, Depends(get_current_claims)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Response:
    """Delete the authenticated user's own account."""
    service.delete_self(claims.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/", response_model=list[UserListItem])
def list_users(
    service: Annotated[AccountService, Depends(get_account_service)],
) -> list[UserListItem]:
    """List all users. Password hashes are never included."""
    return [UserListItem.model_validate(u) for u in service.list_all()]


@router.post("/requestPasswordReset", response_model=MessageResponse)
async def request_password_reset(
    body: PasswordResetRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Email a password reset link to the account owner."""
    await service.request_reset(body.email)
    return MessageResponse(message="Password reset email sent.")


async def _get_reset_body(request: Request) -> PerformResetRequest:
    """Read the reset form either as JSON or as a form post from the reset page."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in ("application/x-www-form-urlencoded", "multipart/form-data"):
        form = await request.form()
        data = {k: v for k, v in form.items() if isinstance(v, str)}
    else:
        try:
            data = await request.json()
        except ValueError as e:
            raise InvalidInputError("Invalid JSON body.") from e
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be an object.")
    try:
        return PerformResetRequest.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError("Token and new password are required.") from e


@router.post("/resetPassword", response_model=MessageResponse)
def reset_password(
    body: Annotated[PerformResetRequest, Depends(_get_reset_body)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Set a new password using a token from the reset email."""
    service.perform_reset(body.token, body.new_password)
    return MessageResponse(message="Password changed successfully.")


@router.get("/resetPassword/{token}", response_class=HTMLResponse)
def reset_password_page(
    token: str,
    settings: Annotated[Settings, Depends(get_settings)],
) -> HTMLResponse:
    """Render the form the emailed link opens; it posts to /resetPassword."""
    page = RESET_PAGE_HTML.format(
        action=html.escape(f"{settings.API_PREFIX}/user/resetPassword", quote=True),
        token=html.escape(token, quote=True),
    )
    return HTMLResponse(content=page)
