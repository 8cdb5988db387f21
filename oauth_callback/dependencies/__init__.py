"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_authorization_service,
    get_credential_store,
    get_google_oauth_client,
)

__all__ = [
    "get_authorization_service",
    "get_credential_store",
    "get_google_oauth_client",
]
