"""
FastAPI application factory and process entry point for the OAuth callback listener.
"""

from __future__ import annotations

import asyncio
import logging
import signal

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from oauth_callback.api.routes import START_PATH, router
from oauth_callback.clients import (
    CredentialStoreError,
    GoogleOAuthClient,
    SQLiteCredentialStore,
)
from oauth_callback.core.config import AppSettings, get_settings
from oauth_callback.core.logging import configure_logging
from oauth_callback.server.listener import CallbackListener

logger = logging.getLogger(__name__)


async def _plain_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def create_app(
    oauth_client: GoogleOAuthClient, credential_store: SQLiteCredentialStore
) -> FastAPI:
    """Factory for the callback application with its collaborators injected."""
    app = FastAPI(
        title="OAuth Callback Listener",
        version="0.1.0",
        description="Captures Google OAuth redirects and stores the resulting credentials.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.oauth_client = oauth_client
    app.state.credential_store = credential_store
    app.add_exception_handler(StarletteHTTPException, _plain_http_error)
    app.include_router(router)
    return app


def build_listener(
    settings: AppSettings, credential_store: SQLiteCredentialStore
) -> CallbackListener:
    oauth_client = GoogleOAuthClient(settings.google, settings.oauth)
    app = create_app(oauth_client, credential_store)
    return CallbackListener(
        app,
        host=settings.oauth.redirect_host,
        port=settings.oauth.redirect_port,
    )


async def run(settings: AppSettings | None = None) -> None:
    """Start the listener and serve until SIGINT or SIGTERM."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    logger.info("=========================================")
    logger.info("OAuth Callback Listener")
    logger.info("=========================================")
    logger.info("Configuration:")
    logger.info("  - Redirect: %s:%s", settings.oauth.redirect_host, settings.oauth.redirect_port)
    logger.info("  - Database: %s", settings.storage.db_path)
    logger.info("  - Provider timeout: %ss", settings.oauth.http_timeout_seconds)

    store = SQLiteCredentialStore(settings.storage.db_path)
    try:
        await store.initialize()
        accounts = await store.list_accounts()
        logger.info("Database initialized with %d account(s)", len(accounts))
    except CredentialStoreError as exc:
        logger.warning(
            "Failed to initialize database, will retry on the next callback: %s", exc
        )

    listener = build_listener(settings, store)
    if not listener.start():
        return

    logger.info("")
    logger.info("Quick Start:")
    logger.info(
        "   1. Open http://%s:%s%s in your browser",
        settings.oauth.redirect_host,
        settings.oauth.redirect_port,
        START_PATH,
    )
    logger.info("   2. Complete Google OAuth authorization")
    logger.info("")

    loop = asyncio.get_running_loop()
    shutdown = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)

    closed = asyncio.ensure_future(listener.wait_closed())
    waiter = asyncio.ensure_future(shutdown.wait())
    await asyncio.wait({closed, waiter}, return_when=asyncio.FIRST_COMPLETED)

    if shutdown.is_set():
        logger.info("Received shutdown signal, shutting down...")
    else:
        waiter.cancel()
    listener.stop()
    await closed


def main() -> None:
    asyncio.run(run())


__all__ = ["build_listener", "create_app", "main", "run"]
