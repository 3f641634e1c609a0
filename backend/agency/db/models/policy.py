"""
Policy model — a purchased insurance product.

`person_id` is the originating person (legacy direct reference, always
set at creation). Who takes part in the policy, and in which role, is
recorded in `policy_persons` (see PolicyBinding).
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from agency.db.models.base import Base


class Policy(Base):
    __tablename__ = "policies"
    __table_args__ = (
        CheckConstraint("valid_from <= valid_to", name="validity_interval"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_id: Mapped[int] = mapped_column(
        ForeignKey("persons.id"), nullable=False, index=True
    )

    product_name: Mapped[str] = mapped_column(String(100), nullable=False)
    coverage_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<Policy id={self.id} {self.product_name!r} person={self.person_id}>"
