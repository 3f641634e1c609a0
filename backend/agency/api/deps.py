"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import Any, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.security import decode_access_token
from agency.db.models.account import Account
from agency.db.session import get_db as _get_db
from agency.repositories import accounts as account_repository
from agency.services.access import Caller
from agency.services.password_reset import ResetTokenStore

security_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session."""
    async for session in _get_db():
        yield session


async def get_current_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> dict[str, Any]:
    """Extract and validate JWT payload from bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials were not provided",
        )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return payload


async def get_current_account(
    db: AsyncSession = Depends(get_db),
    token_payload: dict[str, Any] = Depends(get_current_token_payload),
) -> Account:
    """Resolve an enabled account from JWT payload."""
    subject = token_payload.get("sub")
    try:
        account_id = int(subject)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        ) from None

    account = await account_repository.get_enabled_account_by_id(db, account_id)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or disabled account",
        )

    return account


async def get_caller(account: Account = Depends(get_current_account)) -> Caller:
    return Caller.from_account(account)


async def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    """Allow only ROLE_ADMIN callers."""
    if not caller.privileged:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return caller


def ensure_allowed(allowed: bool, detail: str = "Not allowed to access this record") -> None:
    """Turn a False from the access resolver into HTTP 403."""
    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def get_reset_store(request: Request) -> ResetTokenStore:
    return request.app.state.reset_tokens
