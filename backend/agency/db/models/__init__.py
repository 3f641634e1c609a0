"""
Models package — re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `agency/db/models/<table_name>.py`
    2. Import it here
"""

from agency.db.models.base import Base
from agency.db.models.person import Person
from agency.db.models.policy import Policy
from agency.db.models.claim import Claim
from agency.db.models.policy_binding import PolicyBinding
from agency.db.models.account import Account, AccountRoleName

__all__ = [
    "Base",
    "Person",
    "Policy",
    "Claim",
    "PolicyBinding",
    "Account",
    "AccountRoleName",
]
