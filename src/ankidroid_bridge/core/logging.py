"""Diagnostic log setup.

Library modules only call ``logging.getLogger(__name__)``; an entry point
calls ``configure_logging`` once with ``BridgeSettings.log_level``.
"""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def resolve_level(name: str | None) -> int:
    """Map a level name to its number; unknown or empty names mean WARNING."""

    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str | None = None, fmt: str = DEFAULT_FORMAT) -> None:
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))
        root.addHandler(handler)

    # Transport chatter stays out of the diagnostic channel.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True
