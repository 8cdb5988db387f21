"""Public schema exports."""

from .auth import (
    AuthorizationOutcome,
    HealthStatus,
    OutcomeKind,
    TokenResponse,
    UserInfoResponse,
)

__all__ = [
    "AuthorizationOutcome",
    "HealthStatus",
    "OutcomeKind",
    "TokenResponse",
    "UserInfoResponse",
]
