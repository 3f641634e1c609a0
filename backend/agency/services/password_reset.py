"""
Password-reset tokens.

A token maps to a username for RESET_TOKEN_TTL_MINUTES. The store is the
only in-process mutable state of the application; one instance lives on
`app.state.reset_tokens` and is reached through `agency.api.deps`.
"""

from __future__ import annotations

import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.config import settings
from agency.core.errors import ValidationError
from agency.core.logging import get_logger
from agency.services import accounts as account_service

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResetToken:
    token: str
    username: str
    expires_at: datetime


class ResetTokenStore(ABC):
    """Issues and redeems single-use reset tokens."""

    @abstractmethod
    def issue(self, username: str) -> ResetToken:
        ...

    @abstractmethod
    def peek(self, token: str) -> str | None:
        """Username for a live token without consuming it."""

    @abstractmethod
    def consume(self, token: str) -> str | None:
        """Username for a live token; the token is gone afterwards."""

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired tokens; returns how many were removed."""


class InMemoryResetTokenStore(ResetTokenStore):
    def __init__(
        self,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._ttl = ttl or timedelta(minutes=settings.RESET_TOKEN_TTL_MINUTES)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._tokens: dict[str, ResetToken] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def _sweep_locked(self, now: datetime) -> int:
        expired = [key for key, entry in self._tokens.items() if entry.expires_at <= now]
        for key in expired:
            del self._tokens[key]
        return len(expired)

    def issue(self, username: str) -> ResetToken:
        now = self._clock()
        entry = ResetToken(
            token=secrets.token_urlsafe(32),
            username=username.strip(),
            expires_at=now + self._ttl,
        )
        with self._lock:
            self._sweep_locked(now)
            self._tokens[entry.token] = entry
        return entry

    def peek(self, token: str) -> str | None:
        with self._lock:
            entry = self._tokens.get(token)
            if entry is None or entry.expires_at <= self._clock():
                return None
            return entry.username

    def consume(self, token: str) -> str | None:
        with self._lock:
            entry = self._tokens.pop(token, None)
        if entry is None or entry.expires_at <= self._clock():
            return None
        return entry.username

    def sweep(self) -> int:
        with self._lock:
            return self._sweep_locked(self._clock())


async def complete_reset(
    db: AsyncSession,
    store: ResetTokenStore,
    token: str,
    password: str,
    confirm: str,
) -> bool:
    """
    Redeem `token` and set the new password.

    Validation runs before the token is consumed so a typo does not burn
    it. Returns whether an account was actually updated.
    """
    password = account_service.validate_password(password, confirm)
    username = store.consume(token)
    if username is None:
        raise ValidationError("Reset token is invalid or expired", entity="ResetToken")
    updated = await account_service.reset_credential(db, username, password)
    logger.info("Reset token redeemed", updated=updated)
    return updated
