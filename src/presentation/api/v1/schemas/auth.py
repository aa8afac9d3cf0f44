from datetime import datetime

from src.presentation.api.v1.schemas.base import ApiResponse, CamelModel


# Requests carry optional fields: the session service reports missing ones
class LoginRequest(CamelModel):
    """Schema for email/password login"""

    email: str | None = None
    password: str | None = None


class RefreshTokenRequest(CamelModel):
    """Expired (or live) access token plus the current refresh token"""

    token: str | None = None
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str | None = None
    new_password: str | None = None
    confirm_password: str | None = None


class ForgotPasswordRequest(CamelModel):
    email: str | None = None


class ResetPasswordRequest(CamelModel):
    email: str | None = None
    token: str | None = None
    new_password: str | None = None
    confirm_password: str | None = None


class SessionUserResponse(CamelModel):
    id: int
    email: str
    full_name: str | None
    role: str
    role_id: int | None
    company_id: int | None


class TokenResponse(ApiResponse):
    """Schema for refresh responses"""

    token: str
    refresh_token: str
    refresh_token_expires_at: datetime


class LoginResponse(TokenResponse):
    """Schema for login responses"""

    user: SessionUserResponse
    permissions: list[str] = []
