"""SQLite-backed storage for captured cloud account credentials."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from pathlib import Path
from typing import List

from oauth_callback.models.credentials import CredentialRecord


class CredentialStoreError(Exception):
    """Raised when a credential record cannot be read or written."""


class CredentialStoreNotInitializedError(CredentialStoreError):
    """Raised when the store is used before ``initialize`` has completed."""


class SQLiteCredentialStore:
    """Append-only credential records keyed by a generated id.

    Repeated authorization of the same account adds another row; nothing here
    looks up or replaces an existing record for that email.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._initialized = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS accounts (
                    id TEXT PRIMARY KEY,
                    provider TEXT NOT NULL,
                    email TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at INTEGER NOT NULL
                )
                """
            )

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise CredentialStoreNotInitializedError(
                f"Credential store at {self._db_path} used before initialize()."
            )

    async def initialize(self) -> None:
        """Create the database file and schema. Safe to call more than once."""
        try:
            await asyncio.to_thread(self._ensure_schema)
        except (OSError, sqlite3.Error) as exc:
            raise CredentialStoreError(
                f"Failed to initialize credential store at {self._db_path}: {exc}"
            ) from exc
        self._initialized = True

    async def add_account(self, record: CredentialRecord) -> None:
        self._require_initialized()
        data_json = json.dumps(record.to_storage())

        def _insert() -> None:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO accounts (id, provider, email, data, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.provider,
                        record.identity.email,
                        data_json,
                        record.created_at,
                    ),
                )

        try:
            await asyncio.to_thread(_insert)
        except sqlite3.Error as exc:
            raise CredentialStoreError(
                f"Failed to store account {record.identity.email}: {exc}"
            ) from exc

    async def list_accounts(self) -> List[CredentialRecord]:
        self._require_initialized()

        def _fetch() -> list[sqlite3.Row]:
            with self._connect() as conn:
                return conn.execute(
                    "SELECT data FROM accounts ORDER BY rowid"
                ).fetchall()

        try:
            rows = await asyncio.to_thread(_fetch)
        except sqlite3.Error as exc:
            raise CredentialStoreError(f"Failed to list accounts: {exc}") from exc
        return [CredentialRecord.from_storage(json.loads(row["data"])) for row in rows]


__all__ = [
    "CredentialStoreError",
    "CredentialStoreNotInitializedError",
    "SQLiteCredentialStore",
]
