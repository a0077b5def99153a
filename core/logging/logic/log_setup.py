"""
core/logging/logic/log_setup.py
===============================

Standard-library logging bootstrap shared by the host app and the widget
process. Modules only ever call ``logging.getLogger(__name__)``; the entry
points call :func:`setup_logging` once.
"""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(process)d] %(name)s: %(message)s"


def resolve_level(level: str | int) -> int:
    """Map a level name such as ``"debug"`` to its numeric value (INFO if unknown)."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str | int = "INFO", *, fmt: Optional[str] = None) -> None:
    """Configure the root logger for one process (idempotent via ``force``)."""
    logging.basicConfig(level=resolve_level(level), format=fmt or LOG_FORMAT, force=True)
