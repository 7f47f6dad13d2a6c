"""Centralised logging configuration for the checkout service.

All modules log through ``logging.getLogger(__name__)``; this module only wires
the root handler once so output is consistent under the development server,
Passenger, and container runtimes (stdout).
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s"

# Third-party loggers that are noisy at INFO.
QUIET_LOGGERS = ("stripe", "urllib3")


def configure_logging(level: str | int = "INFO") -> None:
    """Attach a stdout handler to the root logger unless one is already present."""

    root = logging.getLogger()
    resolved = logging.getLevelName(level) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        resolved = logging.INFO

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(resolved)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["LOG_FORMAT", "configure_logging"]
