"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import json
from typing import Any

import httpx
import pytest

from oauth_callback.clients import GoogleOAuthClient
from oauth_callback.core.config import GoogleSettings, OAuthSettings


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


class FakeGoogleEndpoints:
    """Stand-in for the token and userinfo endpoints, recording every call."""

    def __init__(
        self,
        *,
        token_status: int = 200,
        token_body: Any = None,
        userinfo_status: int = 200,
        userinfo_body: Any = None,
        token_exception: Exception | None = None,
    ) -> None:
        self.token_status = token_status
        self.token_body = (
            token_body
            if token_body is not None
            else {"access_token": "tok", "expires_in": 3600, "token_type": "Bearer"}
        )
        self.userinfo_status = userinfo_status
        self.userinfo_body = (
            userinfo_body if userinfo_body is not None else {"email": "user@example.com"}
        )
        self.token_exception = token_exception
        self.token_requests: list[httpx.Request] = []
        self.userinfo_requests: list[httpx.Request] = []

    def _respond(self, status: int, body: Any) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, content=json.dumps(body).encode("utf-8"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == GoogleOAuthClient.TOKEN_URL:
            self.token_requests.append(request)
            if self.token_exception is not None:
                raise self.token_exception
            return self._respond(self.token_status, self.token_body)
        if url == GoogleOAuthClient.USERINFO_URL:
            self.userinfo_requests.append(request)
            return self._respond(self.userinfo_status, self.userinfo_body)
        return httpx.Response(404, text="unexpected url")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def google_settings() -> GoogleSettings:
    return GoogleSettings(
        GOOGLE_CLIENT_ID="test-client-id",
        GOOGLE_CLIENT_SECRET="test-client-secret",
    )


@pytest.fixture()
def oauth_settings() -> OAuthSettings:
    return OAuthSettings(
        OAUTH_REDIRECT_HOST="localhost",
        OAUTH_REDIRECT_PORT=8888,
        OAUTH_HTTP_TIMEOUT=5.0,
    )


@pytest.fixture()
def fake_google() -> FakeGoogleEndpoints:
    return FakeGoogleEndpoints()


@pytest.fixture()
def oauth_client(google_settings, oauth_settings, fake_google) -> GoogleOAuthClient:
    return GoogleOAuthClient(
        google_settings, oauth_settings, transport=fake_google.transport
    )
