from __future__ import annotations

import time

import pytest

from oauth_callback.clients import CredentialStoreError, CredentialStoreNotInitializedError
from oauth_callback.models.credentials import CredentialRecord
from oauth_callback.models.outcomes import AuthorizationSuccess, FailureKind
from oauth_callback.services import AuthorizationService


class RecordingStore:
    def __init__(
        self, *, fail_with: Exception | None = None, initialized: bool = True
    ) -> None:
        self.records: list[CredentialRecord] = []
        self.fail_with = fail_with
        self.initialized = initialized
        self.initialize_calls = 0

    async def initialize(self) -> None:
        self.initialize_calls += 1
        self.initialized = True

    async def add_account(self, record: CredentialRecord) -> None:
        if not self.initialized:
            raise CredentialStoreNotInitializedError("used before initialize()")
        if self.fail_with is not None:
            raise self.fail_with
        self.records.append(record)


@pytest.mark.asyncio
async def test_successful_exchange_writes_exactly_one_record(oauth_client) -> None:
    store = RecordingStore()
    service = AuthorizationService(oauth_client, store)

    capture_seconds = int(time.time())
    result = await service.complete("ABC123")

    assert isinstance(result, AuthorizationSuccess)
    assert result.email == "user@example.com"
    [record] = store.records
    assert record is result.record
    assert abs(record.token.expiry_timestamp - (capture_seconds + 3600)) <= 1
    assert record.created_at == record.last_used
    assert record.token.expiry_timestamp == record.created_at // 1000 + 3600


@pytest.mark.asyncio
async def test_exchange_failure_skips_storage(oauth_client, fake_google) -> None:
    fake_google.token_status = 400
    fake_google.token_body = "invalid_grant"
    store = RecordingStore()

    result = await AuthorizationService(oauth_client, store).complete("ABC123")

    assert not result.ok
    assert result.kind is FailureKind.TOKEN_EXCHANGE
    assert store.records == []


@pytest.mark.asyncio
async def test_storage_error_becomes_storage_failure(oauth_client) -> None:
    store = RecordingStore(fail_with=CredentialStoreError("disk full"))

    result = await AuthorizationService(oauth_client, store).complete("ABC123")

    assert not result.ok
    assert result.kind is FailureKind.STORAGE
    assert result.message == "disk full"


@pytest.mark.asyncio
async def test_each_completion_gets_a_new_record_id(oauth_client) -> None:
    store = RecordingStore()
    service = AuthorizationService(oauth_client, store)

    await service.complete("first")
    await service.complete("second")

    assert len(store.records) == 2
    assert store.records[0].id != store.records[1].id


@pytest.mark.asyncio
async def test_uninitialized_store_is_initialized_once_then_written(oauth_client) -> None:
    store = RecordingStore(initialized=False)

    result = await AuthorizationService(oauth_client, store).complete("ABC123")

    assert isinstance(result, AuthorizationSuccess)
    assert store.initialize_calls == 1
    assert [record.id for record in store.records] == [result.record.id]


@pytest.mark.asyncio
async def test_initialized_store_is_not_reinitialized(oauth_client) -> None:
    store = RecordingStore()

    await AuthorizationService(oauth_client, store).complete("ABC123")

    assert store.initialize_calls == 0


@pytest.mark.asyncio
async def test_failed_retry_of_initialize_becomes_storage_failure(oauth_client) -> None:
    class BrokenStore(RecordingStore):
        async def initialize(self) -> None:
            self.initialize_calls += 1
            raise CredentialStoreError("Failed to initialize credential store: read-only")

    store = BrokenStore(initialized=False)

    result = await AuthorizationService(oauth_client, store).complete("ABC123")

    assert not result.ok
    assert result.kind is FailureKind.STORAGE
    assert "initialize" in result.message
    assert store.initialize_calls == 1
    assert store.records == []
