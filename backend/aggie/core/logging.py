"""Logging setup."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_NAME = "aggie-stream"


def setup_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the ``aggie`` logger."""
    root = logging.getLogger("aggie")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
