"""
Account model — login identity for the agency UI/API.

Roles (account_roles side table):
    ROLE_ADMIN — Full access to every person, policy and claim
    ROLE_USER  — Self-service; sees only data reachable from the linked person
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agency.core.constants import AccountRole
from agency.db.models.base import Base, utcnow


class AccountRoleName(Base):
    __tablename__ = "account_roles"

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True
    )
    role_name: Mapped[str] = mapped_column(String(50), primary_key=True)


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    # stored as typed; uniqueness is checked case-insensitively by the repository
    username: Mapped[str] = mapped_column(
        String(80), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # "My profile" link
    person_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("persons.id", ondelete="SET NULL"), nullable=True, index=True
    )

    roles: Mapped[list[AccountRoleName]] = relationship(
        lazy="selectin", cascade="all, delete-orphan"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def role_names(self) -> set[str]:
        return {r.role_name for r in self.roles}

    @property
    def is_admin(self) -> bool:
        return AccountRole.ADMIN.value in self.role_names

    def __repr__(self) -> str:
        return f"<Account id={self.id} {self.username} roles={sorted(self.role_names)} enabled={self.enabled}>"
