"""Schemas related to OAuth flows."""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, Field


class OutcomeKind(str, Enum):
    CODE = "code"
    ERROR = "error"
    MALFORMED = "malformed"


class AuthorizationOutcome(BaseModel):
    """What the provider reported on a single redirect to the callback path."""

    kind: OutcomeKind
    code: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "AuthorizationOutcome":
        """Classify callback query parameters; a code takes precedence over an error."""
        code = params.get("code")
        if code:
            return cls(kind=OutcomeKind.CODE, code=code)
        error = params.get("error")
        if error:
            return cls(kind=OutcomeKind.ERROR, error=error)
        return cls(kind=OutcomeKind.MALFORMED)


class TokenResponse(BaseModel):
    """Body returned by the token endpoint for an authorization_code grant."""

    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None
    expires_in: int = Field(..., ge=0)
    token_type: str = "Bearer"


class UserInfoResponse(BaseModel):
    """Subset of the userinfo payload used to label a credential."""

    email: str = Field(..., min_length=1)
    name: Optional[str] = None
    picture: Optional[str] = None


class HealthStatus(BaseModel):
    status: str = "ok"
    service: str = "oauth-callback"


__all__ = [
    "AuthorizationOutcome",
    "HealthStatus",
    "OutcomeKind",
    "TokenResponse",
    "UserInfoResponse",
]
