# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the PostureGuard CLI and embedding applications."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "POSTUREGUARD_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING

# httpx/httpcore log every request; their output only helps when debugging a fetch.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(level: str | int | None = None) -> int:
    """
    Turn ``level`` (or ``$POSTUREGUARD_LOG_LEVEL``) into a numeric level.

    Unknown names fall back to WARNING rather than failing the run.
    """
    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or "").strip().upper()
    if not name:
        return DEFAULT_LOG_LEVEL
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else DEFAULT_LOG_LEVEL


def setup_logging(level: str | int | None = None) -> int:
    """Configure the root handler and PostureGuard loggers; returns the level applied."""
    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("postureguard").setLevel(resolved)
    transport_level = resolved if resolved <= logging.DEBUG else max(resolved, logging.WARNING)
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
    return resolved


__all__ = ["resolve_log_level", "setup_logging"]
