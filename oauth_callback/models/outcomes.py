"""
Result values for the exchange and persistence steps of a callback.

Each step returns either a success or a failure value so every failure
branch is a plain object the route can render.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from oauth_callback.models.credentials import CredentialRecord, Identity, TokenSet


class FailureKind(str, Enum):
    TOKEN_EXCHANGE = "token_exchange"
    IDENTITY_RESOLUTION = "identity_resolution"
    TIMEOUT = "timeout"
    NETWORK = "network"
    STORAGE = "storage"


@dataclass(slots=True, frozen=True)
class Failure:
    """A terminal failure for one callback request."""

    kind: FailureKind
    message: str

    ok = False


@dataclass(slots=True, frozen=True)
class ExchangeSuccess:
    """Tokens and identity obtained from the provider for one code."""

    identity: Identity
    token: TokenSet
    captured_at_ms: int

    ok = True


@dataclass(slots=True, frozen=True)
class AuthorizationSuccess:
    """The stored credential produced by a completed callback."""

    record: CredentialRecord

    ok = True

    @property
    def email(self) -> str:
        return self.record.identity.email


ExchangeResult = ExchangeSuccess | Failure
AuthorizationResult = AuthorizationSuccess | Failure


__all__ = [
    "AuthorizationResult",
    "AuthorizationSuccess",
    "ExchangeResult",
    "ExchangeSuccess",
    "Failure",
    "FailureKind",
]
