"""Directory listing and timestamp heuristics for candidate selection."""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import List

from ..logging import get_logger

logger = get_logger(__name__)


class DirectoryScanError(Exception):
    """Raised when an image directory cannot be listed."""


def list_images(directory: Path, file_type: str) -> List[str]:
    """
    List file names in ``directory`` with the given extension, sorted.

    Raises:
        DirectoryScanError: If the directory is missing or unreadable
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise DirectoryScanError(f"Not a directory: {directory}")

    pattern = f"*.{file_type.lstrip('.')}"
    try:
        names = sorted(path.name for path in directory.glob(pattern) if path.is_file())
    except OSError as exc:
        raise DirectoryScanError(f"Failed to list {directory}: {exc}") from exc

    logger.debug(f"Found {len(names)} files matching {pattern} in {directory}")
    return names


def file_timestamp(path: Path) -> datetime:
    """Creation time where the platform records it, modification time otherwise."""
    stat = os.stat(path)
    seconds = getattr(stat, "st_birthtime", None)
    if seconds is None:
        seconds = stat.st_mtime
    return datetime.fromtimestamp(seconds)


def within_time_window(first: Path, second: Path, window: timedelta) -> bool:
    """True when ``first`` was stamped no more than ``window`` before or after ``second``."""
    first_time = file_timestamp(first)
    second_time = file_timestamp(second)
    return second_time - window <= first_time <= second_time + window
