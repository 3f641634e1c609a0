"""Authentication, registration and password-reset schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request payload for login endpoint."""

    username: str = Field(..., min_length=1, max_length=80)
    password: str = Field(..., min_length=1, max_length=256)


class TokenResponse(BaseModel):
    """Bearer access token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., ge=1)


class CurrentAccountResponse(BaseModel):
    """Authenticated account returned by /auth/me."""

    id: int
    username: str
    enabled: bool
    roles: list[str]
    person_id: int | None
    created_at: datetime
    last_login_at: datetime | None


class RegisterRequest(BaseModel):
    """Length rules are enforced by the account service (settings-driven)."""

    username: str = Field(..., max_length=50)
    password: str = Field(..., max_length=48)
    password_again: str = Field(..., max_length=48)


class ForgotPasswordRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=80)


class ForgotPasswordResponse(BaseModel):
    """Neutral answer; the token is only echoed back in the development environment."""

    message: str
    reset_token: str | None = None
    expires_in: int


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., max_length=48)
    confirm: str = Field(..., max_length=48)


class MessageResponse(BaseModel):
    message: str
