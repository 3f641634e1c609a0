"""
Account repository containing all data-access operations for the accounts table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.constants import AccountRole
from agency.core.security import hash_password, verify_password
from agency.db.models.account import Account, AccountRoleName


async def create_account(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    roles: tuple[str, ...] = (AccountRole.USER.value,),
    person_id: int | None = None,
    enabled: bool = True,
) -> Account:
    """Create a new account with a hashed password."""
    account = Account(
        username=username.strip(),
        password_hash=hash_password(password),
        enabled=enabled,
        person_id=person_id,
        roles=[AccountRoleName(role_name=role) for role in dict.fromkeys(roles)],
    )
    db.add(account)
    await db.flush()
    return account


async def get_account_by_id(db: AsyncSession, account_id: int) -> Account | None:
    """Fetch an account by primary key."""
    return await db.get(Account, account_id)


async def get_enabled_account_by_id(db: AsyncSession, account_id: int) -> Account | None:
    """Fetch an enabled account by primary key."""
    stmt = select(Account).where(Account.id == account_id, Account.enabled.is_(True))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_account_by_username(db: AsyncSession, username: str) -> Account | None:
    """Fetch an account by username (case-insensitive)."""
    stmt = select(Account).where(func.lower(Account.username) == username.strip().lower())
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def username_exists(db: AsyncSession, username: str) -> bool:
    """Case-insensitive existence check used by registration."""
    stmt = select(func.count()).select_from(Account).where(
        func.lower(Account.username) == username.strip().lower()
    )
    return (await db.scalar(stmt) or 0) > 0


async def authenticate_account(
    db: AsyncSession,
    *,
    username: str,
    password: str,
) -> Account | None:
    """Validate credentials and return the enabled account on success."""
    account = await get_account_by_username(db, username)
    if account is None or not account.enabled:
        return None
    if not verify_password(password, account.password_hash):
        return None
    return account


async def list_accounts(
    db: AsyncSession,
    *,
    enabled: bool | None = None,
    offset: int = 0,
    limit: int = 50,
) -> list[Account]:
    """List accounts, newest first."""
    stmt = select(Account).order_by(Account.created_at.desc(), Account.id.desc())
    if enabled is not None:
        stmt = stmt.where(Account.enabled == enabled)
    stmt = stmt.offset(offset).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_password(
    db: AsyncSession,
    account_id: int,
    new_password: str,
) -> bool:
    """Change an account's password. Returns True when the account exists."""
    account = await get_account_by_id(db, account_id)
    if account is None:
        return False
    account.password_hash = hash_password(new_password)
    await db.flush()
    return True


async def set_person_link(
    db: AsyncSession,
    account_id: int,
    person_id: int | None,
) -> Account | None:
    """Point the account's profile link at `person_id` (or clear it)."""
    account = await get_account_by_id(db, account_id)
    if account is None:
        return None
    account.person_id = person_id
    await db.flush()
    return account


async def unlink_person(db: AsyncSession, person_id: int) -> int:
    """Clear the profile link of every account pointing at `person_id`."""
    stmt = update(Account).where(Account.person_id == person_id).values(person_id=None)
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount or 0


async def set_enabled(
    db: AsyncSession,
    account_id: int,
    enabled: bool,
) -> Account | None:
    """Enable or disable an account and return the updated row."""
    account = await get_account_by_id(db, account_id)
    if account is None:
        return None
    account.enabled = enabled
    await db.flush()
    return account


async def record_login(db: AsyncSession, account_id: int) -> None:
    """Stamp last_login_at on successful authentication."""
    stmt = update(Account).where(Account.id == account_id).values(last_login_at=datetime.now(timezone.utc))
    await db.execute(stmt)
    await db.flush()
