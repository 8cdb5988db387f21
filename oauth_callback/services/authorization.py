"""Complete an authorization callback: exchange the code, then persist the account."""

from __future__ import annotations

import logging
from typing import Protocol

from oauth_callback.clients.credential_store import (
    CredentialStoreError,
    CredentialStoreNotInitializedError,
)
from oauth_callback.models.credentials import GOOGLE_PROVIDER, CredentialRecord
from oauth_callback.models.outcomes import (
    AuthorizationResult,
    AuthorizationSuccess,
    ExchangeResult,
    Failure,
    FailureKind,
)

logger = logging.getLogger(__name__)


class TokenExchanger(Protocol):
    async def exchange(self, code: str) -> ExchangeResult: ...


class CredentialWriter(Protocol):
    async def initialize(self) -> None: ...

    async def add_account(self, record: CredentialRecord) -> None: ...


class AuthorizationService:
    """Turns one authorization code into one stored credential record."""

    def __init__(
        self,
        oauth_client: TokenExchanger,
        store: CredentialWriter,
        *,
        provider: str = GOOGLE_PROVIDER,
    ) -> None:
        self._oauth = oauth_client
        self._store = store
        self._provider = provider

    async def complete(self, code: str) -> AuthorizationResult:
        exchanged = await self._oauth.exchange(code)
        if not exchanged.ok:
            logger.error(
                "Failed to exchange code (%s): %s", exchanged.kind.value, exchanged.message
            )
            return exchanged

        record = CredentialRecord.create(
            identity=exchanged.identity,
            token=exchanged.token,
            captured_at_ms=exchanged.captured_at_ms,
            provider=self._provider,
        )
        try:
            await self._write(record)
        except CredentialStoreError as exc:
            # Authorization itself succeeded; only the write failed.
            logger.exception("Failed to store account %s", record.identity.email)
            return Failure(FailureKind.STORAGE, str(exc))

        logger.info("Account %s stored successfully", record.identity.email)
        return AuthorizationSuccess(record=record)

    async def _write(self, record: CredentialRecord) -> None:
        try:
            await self._store.add_account(record)
        except CredentialStoreNotInitializedError:
            # Bootstrap may have failed to create the table; try once more per write.
            logger.warning(
                "Credential store not initialized, retrying initialize before storing %s",
                record.identity.email,
            )
            await self._store.initialize()
            await self._store.add_account(record)


__all__ = ["AuthorizationService"]
