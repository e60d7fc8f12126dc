"""Authentication routes for the FieldFlowPM API.

The session token travels only in an HTTP-only cookie; response bodies
carry the public user projection and nothing else.

Routes:
- POST /api/auth/login  - Verify credentials, set the session cookie
- POST /api/auth/logout - Revoke the session, clear the cookie
- GET  /api/auth/me     - Current user
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from fieldflow.auth.service import AuthService
from fieldflow.config import AppConfig
from fieldflow.core.audit_logger import log_action
from fieldflow.core.errors import AuthenticationError
from fieldflow.models import PublicUser
from fieldflow.web.dependencies import (
    get_app_config,
    get_auth_service,
    get_current_user,
    get_session_token,
)
from fieldflow.web.models import LoginRequest, LoginResponse, MessageResponse

router = APIRouter(prefix="/api/auth", tags=["authentication"])


# ============================================================================
# Authentication Routes
# ============================================================================


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
    config: AppConfig = Depends(get_app_config),
):
    """Verify credentials and open a session.

    Unknown usernames, wrong passwords and inactive accounts all get the
    same 401 so usernames cannot be enumerated.
    """
    try:
        result = auth.login(body.username, body.password)
    except AuthenticationError:
        log_action(request, "LOGIN_FAILED", body.username, resource_type="system")
        raise

    response.set_cookie(
        key=config.session.cookie_name,
        value=result.token,
        httponly=True,
        max_age=config.session.ttl_seconds,
        samesite="lax",
        secure=config.session.cookie_secure,
    )
    log_action(request, "LOGIN", result.user.username, user_id=result.user.id, resource_type="system")
    return LoginResponse(user=result.user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    user: PublicUser = Depends(get_current_user),
    token: str | None = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
    config: AppConfig = Depends(get_app_config),
):
    """Revoke the caller's session and clear the cookie."""
    auth.logout(token)
    response.delete_cookie(
        key=config.session.cookie_name,
        httponly=True,
        samesite="lax",
        secure=config.session.cookie_secure,
    )
    log_action(request, "LOGOUT", user.username, user_id=user.id, resource_type="system")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=PublicUser)
async def me(user: PublicUser = Depends(get_current_user)):
    return user
