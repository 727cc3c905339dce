"""
Request and response models for the auth service API.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field

from .tokens import Claims


class HashRequest(BaseModel):
    """Request model for password hashing."""
    password: str


class HashResponse(BaseModel):
    """Response model for password hashing."""
    hash: str


class PasswordVerificationRequest(BaseModel):
    """Request model for password verification."""
    password: str
    hash: str


class PasswordVerificationResponse(BaseModel):
    """Response model for password verification."""
    valid: bool


class TokenIssueRequest(BaseModel):
    """Request model for token issuance."""
    sub: str
    exp_seconds: Optional[int] = Field(default=None, ge=0)


class TokenIssueResponse(BaseModel):
    """Response model for token issuance."""
    token: str


class TokenVerificationRequest(BaseModel):
    """Request model for token verification.

    A missing or non-string token is accepted here and rejected as
    unauthorized by the codec, the same as a forged one.
    """
    token: Any = ""


class KeyRingResponse(BaseModel):
    """Kids known to the service. Never includes secret material."""
    active_kid: str
    kids: List[str]


__all__ = [
    "Claims",
    "HashRequest",
    "HashResponse",
    "KeyRingResponse",
    "PasswordVerificationRequest",
    "PasswordVerificationResponse",
    "TokenIssueRequest",
    "TokenIssueResponse",
    "TokenVerificationRequest",
]
