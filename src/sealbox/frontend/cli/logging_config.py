"""Lightweight logging setup for the CLI."""

from __future__ import annotations

import logging
import sys


def configure_logging(level: int = logging.WARNING) -> None:
    # Configure root logger once; stderr keeps stdout free for results.
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def level_from_name(name: str | None, default: int = logging.WARNING) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant."""
    if not name:
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default
