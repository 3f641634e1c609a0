"""API schema package."""

from agency.api.schemas.auth import CurrentAccountResponse, LoginRequest, TokenResponse
from agency.api.schemas.claims import ClaimResponse
from agency.api.schemas.persons import PersonResponse
from agency.api.schemas.policies import PolicyResponse

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "CurrentAccountResponse",
    "ClaimResponse",
    "PersonResponse",
    "PolicyResponse",
]
