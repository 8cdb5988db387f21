"""
FastAPI routes served by the OAuth callback listener.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from oauth_callback.api.pages import (
    render_failure_page,
    render_provider_error_page,
    render_start_page,
    render_success_page,
)
from oauth_callback.clients import GoogleOAuthClient
from oauth_callback.clients.google_auth import CALLBACK_PATH
from oauth_callback.dependencies import (
    get_authorization_service,
    get_google_oauth_client,
)
from oauth_callback.schemas import AuthorizationOutcome, HealthStatus, OutcomeKind
from oauth_callback.services import AuthorizationService

router = APIRouter()
logger = logging.getLogger(__name__)

START_PATH = "/auth/start"


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> HealthStatus:
    """Simple health endpoint for monitoring."""
    return HealthStatus()


@router.get(START_PATH, response_class=HTMLResponse)
async def start_authorization(
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
) -> HTMLResponse:
    """Serve the setup page linking to the Google consent screen."""
    authorization_url = oauth_client.build_authorization_url()
    return HTMLResponse(render_start_page(authorization_url))


@router.get(CALLBACK_PATH)
async def handle_oauth_callback(
    request: Request,
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """
    Receive the provider redirect.

    The response is held until the exchange and the store write have settled.
    """
    outcome = AuthorizationOutcome.from_query(request.query_params)

    if outcome.kind is OutcomeKind.MALFORMED:
        return PlainTextResponse(
            "Missing code parameter", status_code=HTTPStatus.BAD_REQUEST
        )

    if outcome.kind is OutcomeKind.ERROR:
        logger.error("OAuth error: %s", outcome.error)
        return HTMLResponse(
            render_provider_error_page(outcome.error or ""),
            status_code=HTTPStatus.BAD_REQUEST,
        )

    code = outcome.code or ""
    logger.info("Received authorization code: %s...", code[:10])

    result = await authorization.complete(code)
    if not result.ok:
        return HTMLResponse(
            render_failure_page(result.message, retry_path=START_PATH),
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    return HTMLResponse(render_success_page(result.email))


__all__ = ["START_PATH", "router"]
