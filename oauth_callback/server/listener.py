"""
Embedded HTTP listener hosting the callback application.

The listener runs a uvicorn server as a task on the caller's event loop so it
can live inside a larger asyncio process. Bind and runtime failures are
logged and leave the listener stopped; they never reach the host process.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
from enum import Enum
from typing import Iterator, Optional

import uvicorn
from fastapi import FastAPI

from oauth_callback.api.routes import START_PATH

logger = logging.getLogger(__name__)

BIND_ADDRESS = "0.0.0.0"


class ListenerState(str, Enum):
    STOPPED = "stopped"
    LISTENING = "listening"


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the host process."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def install_signal_handlers(self) -> None:
        pass


class CallbackListener:
    """Owns the lifecycle of the callback server: ``STOPPED`` <-> ``LISTENING``."""

    def __init__(
        self,
        app: FastAPI,
        *,
        host: str,
        port: int,
        bind_address: str = BIND_ADDRESS,
    ) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._bind_address = bind_address
        self._state = ListenerState.STOPPED
        self._server: Optional[_EmbeddedServer] = None
        self._sock: Optional[socket.socket] = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._bound_port: Optional[int] = None

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state is ListenerState.LISTENING

    @property
    def is_serving(self) -> bool:
        """True once the server has started accepting connections."""
        return self._server is not None and self._server.started

    @property
    def bound_port(self) -> Optional[int]:
        """Port actually bound, which differs from the configured one when that is 0."""
        return self._bound_port

    @property
    def setup_url(self) -> str:
        return f"http://{self._host}:{self._port}{START_PATH}"

    def _bind(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._bind_address, self._port))
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        return sock

    def start(self) -> bool:
        """
        Bind the listening socket and begin serving on the running event loop.

        Returns False when the socket could not be bound. Calling this while
        already listening logs a warning and leaves the running server alone.
        """
        if self._state is ListenerState.LISTENING:
            logger.warning("AuthServer: Server already running")
            return True

        loop = asyncio.get_running_loop()
        try:
            sock = self._bind()
        except OSError as exc:
            logger.error(
                "AuthServer: Failed to bind %s:%s: %s",
                self._bind_address,
                self._port,
                exc,
            )
            return False

        config = uvicorn.Config(
            self._app,
            lifespan="off",
            log_config=None,
            access_log=False,
        )
        server = _EmbeddedServer(config)
        self._server = server
        self._sock = sock
        self._bound_port = sock.getsockname()[1]
        self._state = ListenerState.LISTENING

        task = loop.create_task(self._serve(server, sock))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(
            "AuthServer: Listening on http://%s:%s", self._bind_address, self._bound_port
        )
        logger.info("AuthServer: OAuth setup page available at %s", self.setup_url)
        return True

    async def _serve(self, server: _EmbeddedServer, sock: socket.socket) -> None:
        try:
            await server.serve(sockets=[sock])
        except SystemExit:
            # uvicorn calls sys.exit when startup fails.
            if not server.should_exit:
                logger.error("AuthServer: Server failed to start on port %s", self._bound_port)
        except Exception:
            if server.should_exit:
                # stop() closed the socket before uvicorn finished starting up.
                logger.debug("AuthServer: Server stopped during startup", exc_info=True)
            else:
                logger.exception("AuthServer: Server error")
        finally:
            sock.close()
            if self._server is server:
                self._server = None
                self._sock = None
                self._state = ListenerState.STOPPED

    def stop(self) -> None:
        """
        Close the listening socket without waiting for in-flight requests.

        New connections are refused as soon as this returns, so the port can be
        bound again right away. Requests already being handled run to
        completion on the serve task; ``wait_closed`` waits for them.
        """
        server = self._server
        if server is None:
            return
        server.should_exit = True
        server.force_exit = True
        # uvicorn only notices should_exit on its next tick.
        for listening in getattr(server, "servers", ()):
            listening.close()
        if self._sock is not None:
            self._sock.close()
        self._server = None
        self._sock = None
        self._state = ListenerState.STOPPED
        logger.info("AuthServer: Stopped")

    async def wait_closed(self) -> None:
        """Wait for every serve task started so far to finish, e.g. after ``stop``."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


__all__ = ["BIND_ADDRESS", "CallbackListener", "ListenerState"]
