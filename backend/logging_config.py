"""Logging setup for the application entry point."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Send log records to stderr at ``level``.

    ``level`` defaults to ``COACHLIX_LOG_LEVEL`` or ``INFO``.  Calling this
    again once a handler is installed does nothing.
    """
    root = logging.getLogger()
    if any(getattr(h, "_coachlix", False) for h in root.handlers):
        return

    level = level or os.environ.get("COACHLIX_LOG_LEVEL", "INFO")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._coachlix = True
    root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Connection pool chatter from requests
    logging.getLogger("urllib3").setLevel(logging.WARNING)
