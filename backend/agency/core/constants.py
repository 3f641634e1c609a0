"""Shared constants and enums used across the application."""

from enum import StrEnum


class AccountRole(StrEnum):
    """Role names stored in the account_roles side table."""

    ADMIN = "ROLE_ADMIN"
    USER = "ROLE_USER"


class BindingRole(StrEnum):
    """Role of a person inside a policy."""

    CONTRACT_HOLDER = "CONTRACT_HOLDER"  # financially responsible party
    INSURED = "INSURED"  # covered person


class ClaimState(StrEnum):
    """Lifecycle state of a claim."""

    NEW = "NEW"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class ProfileSaveResult(StrEnum):
    """Outcome of saving the caller's own profile."""

    CREATED = "CREATED"
    UPDATED = "UPDATED"


class ClaimQueryKind(StrEnum):
    """How a free-text claim search was interpreted."""

    ALL = "ALL"
    DAY = "DAY"
    MONTH = "MONTH"
    TEXT = "TEXT"
