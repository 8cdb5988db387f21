"""
Domain models for captured OAuth credentials.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

GOOGLE_PROVIDER = "google"


class TokenSet(BaseModel):
    """Tokens returned by the provider plus the derived absolute expiry."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expires_in: int = Field(..., ge=0)
    expiry_timestamp: int = Field(
        ..., description="Capture time in epoch seconds plus expires_in."
    )

    @classmethod
    def from_capture(
        cls,
        *,
        access_token: str,
        refresh_token: Optional[str],
        token_type: str,
        expires_in: int,
        captured_at_seconds: int,
    ) -> "TokenSet":
        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=token_type,
            expires_in=expires_in,
            expiry_timestamp=captured_at_seconds + expires_in,
        )


class Identity(BaseModel):
    """The authorizing user as reported by the userinfo endpoint."""

    model_config = ConfigDict(frozen=True)

    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class CredentialRecord(BaseModel):
    """Durable pairing of an identity with the tokens issued to it.

    The persisted layout flattens the identity onto the record and writes a
    missing refresh token as an empty string; the consuming proxy reads
    exactly that shape.
    """

    id: str
    provider: str
    identity: Identity
    token: TokenSet
    created_at: int = Field(..., description="Capture time in epoch milliseconds.")
    last_used: int

    @classmethod
    def create(
        cls,
        *,
        identity: Identity,
        token: TokenSet,
        captured_at_ms: Optional[int] = None,
        provider: str = GOOGLE_PROVIDER,
    ) -> "CredentialRecord":
        now_ms = captured_at_ms if captured_at_ms is not None else int(time.time() * 1000)
        return cls(
            id=str(uuid.uuid4()),
            provider=provider,
            identity=identity,
            token=token,
            created_at=now_ms,
            last_used=now_ms,
        )

    def to_storage(self) -> Dict[str, Any]:
        token = self.token.model_dump()
        token["refresh_token"] = token["refresh_token"] or ""
        return {
            "id": self.id,
            "provider": self.provider,
            "email": self.identity.email,
            "name": self.identity.name,
            "avatar_url": self.identity.avatar_url,
            "token": token,
            "created_at": self.created_at,
            "last_used": self.last_used,
        }

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "CredentialRecord":
        token = dict(data["token"])
        token["refresh_token"] = token.get("refresh_token") or None
        return cls(
            id=data["id"],
            provider=data["provider"],
            identity=Identity(
                email=data["email"],
                name=data.get("name"),
                avatar_url=data.get("avatar_url"),
            ),
            token=TokenSet(**token),
            created_at=data["created_at"],
            last_used=data.get("last_used", data["created_at"]),
        )


__all__ = ["CredentialRecord", "GOOGLE_PROVIDER", "Identity", "TokenSet"]
