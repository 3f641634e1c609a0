"""Authentication endpoints: login, registration, password reset and introspection."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency.api.deps import get_current_account, get_db, get_reset_store
from agency.api.schemas.auth import (
    CurrentAccountResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from agency.core.config import settings
from agency.core.security import create_access_token
from agency.db.models.account import Account
from agency.services import accounts as account_service
from agency.services.password_reset import ResetTokenStore, complete_reset

router = APIRouter(prefix="/auth", tags=["Auth"])

_RESET_MESSAGE = "If the account exists, the password can now be reset with the token"


def _account_response(account: Account) -> CurrentAccountResponse:
    return CurrentAccountResponse(
        id=account.id,
        username=account.username,
        enabled=account.enabled,
        roles=sorted(account.role_names),
        person_id=account.person_id,
        created_at=account.created_at,
        last_login_at=account.last_login_at,
    )


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)) -> TokenResponse:
    """Authenticate an account and issue an access token."""
    account = await account_service.login(db, payload.username, payload.password)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    access_token = create_access_token(
        {
            "sub": str(account.id),
            "username": account.username,
            "roles": sorted(account.role_names),
        }
    )
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get("/me", response_model=CurrentAccountResponse)
async def read_current_account(
    current_account: Account = Depends(get_current_account),
) -> CurrentAccountResponse:
    """Return the currently authenticated account."""
    return _account_response(current_account)


@router.post("/register", response_model=CurrentAccountResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)) -> CurrentAccountResponse:
    """Create a self-service account."""
    account = await account_service.register(db, payload.username, payload.password, payload.password_again)
    return _account_response(account)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def forgot_password(
    payload: ForgotPasswordRequest,
    store: ResetTokenStore = Depends(get_reset_store),
) -> ForgotPasswordResponse:
    """
    Issue a reset token. The answer is identical for known and unknown
    usernames. Outside development the token never leaves the store.
    """
    entry = store.issue(payload.username)
    return ForgotPasswordResponse(
        message=_RESET_MESSAGE,
        reset_token=entry.token if settings.APP_ENV == "development" else None,
        expires_in=settings.RESET_TOKEN_TTL_MINUTES * 60,
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    store: ResetTokenStore = Depends(get_reset_store),
) -> MessageResponse:
    """Redeem a reset token."""
    await complete_reset(db, store, payload.token, payload.password, payload.confirm)
    return MessageResponse(message="Password has been reset")
