"""Logging setup shared by the library and the server."""

from __future__ import annotations

import logging

from cardnav.config import CARDNAV_LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def configure_logging(level: str | int | None = None) -> None:
    """Install a single stream handler on the root logger.

    Repeated calls only adjust the level.
    """
    global _configured
    root = logging.getLogger()
    if level is not None:
        root.setLevel(level)
    if _configured:
        return
    if level is None:
        root.setLevel(CARDNAV_LOG_LEVEL)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring logging on first use."""
    configure_logging()
    return logging.getLogger(name)
