"""
Dependency providers handing the injected collaborators to route handlers.

``create_app`` places the OAuth client and credential store on ``app.state``;
nothing here constructs them.
"""

from fastapi import Depends, Request

from oauth_callback.clients import GoogleOAuthClient, SQLiteCredentialStore
from oauth_callback.services import AuthorizationService


def get_google_oauth_client(request: Request) -> GoogleOAuthClient:
    """Return the OAuth client the app was built with."""
    return request.app.state.oauth_client


def get_credential_store(request: Request) -> SQLiteCredentialStore:
    """Return the credential store the app was built with."""
    return request.app.state.credential_store


def get_authorization_service(
    oauth_client: GoogleOAuthClient = Depends(get_google_oauth_client),
    store: SQLiteCredentialStore = Depends(get_credential_store),
) -> AuthorizationService:
    """Build the per-request service that runs exchange and persistence."""
    return AuthorizationService(oauth_client, store)


__all__ = [
    "get_authorization_service",
    "get_credential_store",
    "get_google_oauth_client",
]
