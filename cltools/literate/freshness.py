"""Staleness checks for derived module files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

Timestamp = Optional[int]


def needs_regeneration(source: Timestamp, definition: Timestamp, implementation: Timestamp) -> bool:
    """Return True unless ``source`` is strictly older than both outputs.

    A missing output (``None``) counts as the earliest possible instant.
    ``source`` must be present; callers skip modules without a literate file.
    """
    if source is None:
        raise ValueError("source timestamp is required")
    if definition is None or implementation is None:
        return True
    return not (source < definition and source < implementation)


def modification_time(path: Path) -> Timestamp:
    """Return ``path``'s modification time in nanoseconds, or None if absent."""
    try:
        return os.stat(path).st_mtime_ns
    except FileNotFoundError:
        return None


__all__ = ["Timestamp", "modification_time", "needs_regeneration"]
