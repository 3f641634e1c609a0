"""
PolicyBinding — the person ↔ policy join carrying a role.

The composite primary key makes (policy, person, role) unique. Rows are
inserted and deleted, never updated in place. "At most one contract
holder per policy" is enforced in `agency.services.role_bindings`.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from agency.db.models.base import Base


class PolicyBinding(Base):
    __tablename__ = "policy_persons"

    policy_id: Mapped[int] = mapped_column(ForeignKey("policies.id"), primary_key=True)
    person_id: Mapped[int] = mapped_column(ForeignKey("persons.id"), primary_key=True, index=True)
    role: Mapped[str] = mapped_column(String(20), primary_key=True)  # CONTRACT_HOLDER | INSURED

    def __repr__(self) -> str:
        return f"<PolicyBinding policy={self.policy_id} person={self.person_id} role={self.role}>"
