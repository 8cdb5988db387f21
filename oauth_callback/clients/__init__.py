"""Expose constructed client wrappers."""

from .credential_store import (
    CredentialStoreError,
    CredentialStoreNotInitializedError,
    SQLiteCredentialStore,
)
from .google_auth import GoogleOAuthClient

__all__ = [
    "CredentialStoreError",
    "CredentialStoreNotInitializedError",
    "GoogleOAuthClient",
    "SQLiteCredentialStore",
]
