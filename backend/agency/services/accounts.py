"""
Account service — registration, login, the caller's own profile and
credential reset.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.config import settings
from agency.core.constants import AccountRole, ProfileSaveResult
from agency.core.errors import ConflictError, NotFoundError, ValidationError
from agency.core.logging import get_logger
from agency.db.models.account import Account
from agency.db.models.person import Person
from agency.db.session import atomic
from agency.repositories import accounts as account_repository
from agency.repositories import persons as person_repository
from agency.services.drafts import PersonDraft

logger = get_logger(__name__)


def validate_password(password: str | None, confirm: str | None) -> str:
    """Trimmed password, or ValidationError when too short or not confirmed."""
    password = (password or "").strip()
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
            entity="Account",
        )
    if password != (confirm or "").strip():
        raise ValidationError("Passwords do not match", entity="Account")
    return password


async def register(
    db: AsyncSession,
    username: str | None,
    password: str | None,
    password_again: str | None,
) -> Account:
    """Create an enabled ROLE_USER account."""
    username = (username or "").strip()
    if len(username) < settings.USERNAME_MIN_LENGTH:
        raise ValidationError(
            f"Username must be at least {settings.USERNAME_MIN_LENGTH} characters",
            entity="Account",
        )
    password = validate_password(password, password_again)

    if await account_repository.username_exists(db, username):
        raise ConflictError("Username is already taken", entity="Account", details={"username": username})

    try:
        async with atomic(db):
            account = await account_repository.create_account(
                db,
                username=username,
                password=password,
                roles=(AccountRole.USER.value,),
            )
    except IntegrityError:
        raise ConflictError(
            "Username is already taken", entity="Account", details={"username": username}
        ) from None

    logger.info("Account registered", account_id=account.id, username=account.username)
    return account


async def login(db: AsyncSession, username: str, password: str) -> Account | None:
    """Authenticate and stamp last_login_at. None on bad credentials."""
    account = await account_repository.authenticate_account(db, username=username, password=password)
    if account is None:
        logger.warning("Login failed", username=username)
        return None
    await account_repository.record_login(db, account.id)
    logger.info("Login succeeded", account_id=account.id)
    return account


async def _require_account(db: AsyncSession, username: str) -> Account:
    account = await account_repository.get_account_by_username(db, username)
    if account is None:
        raise NotFoundError("Account", username)
    return account


async def load_profile(db: AsyncSession, username: str) -> Person | None:
    """The account's linked person, or None before the first profile save."""
    account = await _require_account(db, username)
    if account.person_id is None:
        return None
    return await person_repository.get_person(db, account.person_id)


async def save_profile(
    db: AsyncSession,
    username: str,
    draft: PersonDraft,
) -> tuple[ProfileSaveResult, Person]:
    """
    Create and link the profile on first save, update it afterwards.

    The link is set automatically only while the account has none.
    """
    account = await _require_account(db, username)
    fields = draft.model_dump()

    if account.person_id is None:
        async with atomic(db):
            person = await person_repository.create_person(db, **fields)
            await account_repository.set_person_link(db, account.id, person.id)
        logger.info("Profile created", account_id=account.id, person_id=person.id)
        return ProfileSaveResult.CREATED, person

    person = await person_repository.get_person(db, account.person_id)
    if person is None:
        raise NotFoundError("Person", account.person_id)
    await person_repository.update_person(db, person, **fields)
    logger.info("Profile updated", account_id=account.id, person_id=person.id)
    return ProfileSaveResult.UPDATED, person


async def link_person(db: AsyncSession, account_id: int, person_id: int) -> Account:
    """Explicitly point an account at a person (admin operation)."""
    if await person_repository.get_person(db, person_id) is None:
        raise NotFoundError("Person", person_id)
    account = await account_repository.set_person_link(db, account_id, person_id)
    if account is None:
        raise NotFoundError("Account", account_id)
    logger.info("Account linked", account_id=account_id, person_id=person_id)
    return account


async def list_accounts(db: AsyncSession, *, offset: int = 0, limit: int = 50) -> list[Account]:
    return await account_repository.list_accounts(db, offset=offset, limit=limit)


async def set_enabled(db: AsyncSession, account_id: int, enabled: bool) -> Account:
    account = await account_repository.set_enabled(db, account_id, enabled)
    if account is None:
        raise NotFoundError("Account", account_id)
    logger.info("Account enabled flag changed", account_id=account_id, enabled=enabled)
    return account


async def reset_credential(db: AsyncSession, username: str, new_password: str) -> bool:
    """Set a new password. False when no such account exists."""
    account = await account_repository.get_account_by_username(db, username)
    if account is None:
        return False
    await account_repository.update_password(db, account.id, new_password)
    logger.info("Password reset", account_id=account.id)
    return True
