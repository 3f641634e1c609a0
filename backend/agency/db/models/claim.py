"""
Claim model — a reported incident against a policy.

`policy_id` is required when the claim is created but is nulled by the
database if the policy row disappears. `person_id` is a denormalized
copy of the owning person (no FK) and stays as the fallback owner.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from agency.core.constants import ClaimState
from agency.db.models.base import Base


class Claim(Base):
    __tablename__ = "claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    policy_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("policies.id", ondelete="SET NULL"), nullable=True, index=True
    )
    person_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    occurred_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    state: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ClaimState.NEW.value
    )  # NEW | RESOLVED | CLOSED

    def __repr__(self) -> str:
        return f"<Claim id={self.id} policy={self.policy_id} person={self.person_id} state={self.state}>"
