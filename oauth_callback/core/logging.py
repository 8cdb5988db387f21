"""
Logging setup for the callback listener and its bootstrap.

The embedded uvicorn server is started without its own log config, so its
records flow through the root handler configured here.
"""

import logging
import sys

_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging and quiet per-request transport chatter."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]
