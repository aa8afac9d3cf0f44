import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.application.services.session_manager import LoginResult, SessionManager
from src.domain.entities.actor import Actor
from src.infrastructure.config.settings import get_settings
from src.presentation.api.dependencies import (get_current_actor,
                                               get_session_manager)
from src.presentation.api.v1.schemas.auth import (ChangePasswordRequest,
                                                  ForgotPasswordRequest,
                                                  LoginRequest, LoginResponse,
                                                  RefreshTokenRequest,
                                                  ResetPasswordRequest,
                                                  SessionUserResponse,
                                                  TokenResponse)
from src.presentation.api.v1.schemas.base import ApiResponse
from src.presentation.middleware.rate_limit import limiter

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

Sessions = Annotated[SessionManager, Depends(get_session_manager)]


def _login_response(result: LoginResult) -> LoginResponse:
    return LoginResponse(
        message="Login successful.",
        token=result.tokens.token,
        refresh_token=result.tokens.refresh_token,
        refresh_token_expires_at=result.tokens.refresh_token_expires_at,
        user=SessionUserResponse.model_validate(result.user),
        permissions=result.permissions,
    )


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,  # Required by slowapi for rate limiting (extracts remote address)
    body: LoginRequest,
    sessions: Sessions,
):
    """
    Authenticate with email and password.

    Returns an access token, a refresh token (7 days), the user summary and
    the user's permission names (queried directly).
    """
    result = await sessions.login(body.email, body.password)
    return _login_response(result)


@router.post("/login-cached", response_model=LoginResponse)
@limiter.limit(settings.login_rate_limit)
async def login_cached(
    request: Request,
    body: LoginRequest,
    sessions: Sessions,
):
    """Same as /login, with permissions served from the permission cache"""
    result = await sessions.login(body.email, body.password, use_permission_cache=True)
    return _login_response(result)


@router.post("/refresh-token", response_model=TokenResponse)
async def refresh_token(body: RefreshTokenRequest, sessions: Sessions):
    """
    Exchange an access token (expired or not) and the current refresh token
    for a new pair. The presented refresh token stops working.
    """
    tokens = await sessions.refresh(body.token, body.refresh_token)
    return TokenResponse(
        message="Token refreshed successfully.",
        token=tokens.token,
        refresh_token=tokens.refresh_token,
        refresh_token_expires_at=tokens.refresh_token_expires_at,
    )


@router.post("/logout", response_model=ApiResponse)
async def logout(
    actor: Annotated[Actor, Depends(get_current_actor)],
    sessions: Sessions,
):
    await sessions.logout(actor.user_id)
    return ApiResponse(message="Logged out successfully.")


@router.post("/change-password", response_model=ApiResponse)
async def change_password(
    body: ChangePasswordRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    sessions: Sessions,
):
    await sessions.change_password(
        actor.user_id, body.current_password, body.new_password, body.confirm_password
    )
    return ApiResponse(message="Password changed successfully.")


@router.post("/forgot-password", response_model=ApiResponse)
@limiter.limit(settings.login_rate_limit)
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    sessions: Sessions,
):
    """Email a one-hour password reset link"""
    await sessions.forgot_password(body.email)
    return ApiResponse(message="Password reset link has been sent to your email.")


@router.post("/reset-password", response_model=ApiResponse)
async def reset_password(body: ResetPasswordRequest, sessions: Sessions):
    await sessions.reset_password(
        body.email, body.token, body.new_password, body.confirm_password
    )
    return ApiResponse(message="Password has been reset successfully.")
