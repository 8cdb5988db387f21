"""
Google OAuth utilities.

These helpers build the consent URL and turn an authorization code into a
token set plus the identity of the user who granted it.
"""

from __future__ import annotations

import logging
import time
from typing import Optional
from urllib.parse import urlencode

import httpx
from fastapi import status
from pydantic import ValidationError

from oauth_callback.core.config import GoogleSettings, OAuthSettings
from oauth_callback.models.credentials import Identity, TokenSet
from oauth_callback.models.outcomes import (
    ExchangeResult,
    ExchangeSuccess,
    Failure,
    FailureKind,
)
from oauth_callback.schemas.auth import TokenResponse, UserInfoResponse

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/oauth-callback"


class GoogleOAuthClient:
    """Build Google authorization URLs and exchange authorization codes."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._transport = transport

    @property
    def redirect_uri(self) -> str:
        return (
            f"http://{self._oauth.redirect_host}:{self._oauth.redirect_port}"
            f"{CALLBACK_PATH}"
        )

    def build_authorization_url(self) -> str:
        """Construct the Google OAuth consent URL."""
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self._oauth.scopes),
            "access_type": "offline",
            "prompt": "consent",
            "include_granted_scopes": "true",
        }
        return f"{self.AUTH_BASE_URL}?{urlencode(params)}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._oauth.http_timeout_seconds,
            transport=self._transport,
        )

    async def exchange(self, code: str) -> ExchangeResult:
        """
        Exchange an authorization code for tokens and resolve the user's identity.

        Makes a single attempt against each endpoint. The userinfo endpoint is
        only called once the token endpoint has answered successfully.
        """
        payload = {
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "code": code,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }

        try:
            async with self._client() as client:
                response = await client.post(self.TOKEN_URL, data=payload)
                if response.status_code != status.HTTP_200_OK:
                    return Failure(
                        FailureKind.TOKEN_EXCHANGE,
                        f"Token exchange failed: {response.text}",
                    )

                captured_at_ms = int(time.time() * 1000)
                try:
                    tokens = TokenResponse.model_validate(response.json())
                except (ValueError, ValidationError):
                    return Failure(
                        FailureKind.TOKEN_EXCHANGE,
                        "Incomplete token payload returned from Google.",
                    )

                user_response = await client.get(
                    self.USERINFO_URL,
                    headers={"Authorization": f"Bearer {tokens.access_token}"},
                )
                if user_response.status_code != status.HTTP_200_OK:
                    logger.warning(
                        "Discarding access token: userinfo returned %s",
                        user_response.status_code,
                    )
                    return Failure(
                        FailureKind.IDENTITY_RESOLUTION,
                        f"Failed to fetch user info ({user_response.status_code}): "
                        f"{user_response.text}",
                    )

                try:
                    user_info = UserInfoResponse.model_validate(user_response.json())
                except (ValueError, ValidationError):
                    logger.warning("Discarding access token: userinfo payload had no email")
                    return Failure(
                        FailureKind.IDENTITY_RESOLUTION,
                        "Failed to fetch user info: no email in response.",
                    )
        except httpx.TimeoutException as exc:
            return Failure(
                FailureKind.TIMEOUT,
                f"Timed out contacting Google after {self._oauth.http_timeout_seconds}s "
                f"({exc.__class__.__name__}).",
            )
        except httpx.HTTPError as exc:
            return Failure(FailureKind.NETWORK, f"Could not reach Google: {exc}")

        token = TokenSet.from_capture(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            captured_at_seconds=captured_at_ms // 1000,
        )
        identity = Identity(
            email=user_info.email,
            name=user_info.name,
            avatar_url=user_info.picture,
        )
        return ExchangeSuccess(
            identity=identity, token=token, captured_at_ms=captured_at_ms
        )


__all__ = ["CALLBACK_PATH", "GoogleOAuthClient"]
