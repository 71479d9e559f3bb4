"""Utility functions for working with the operating system."""

from __future__ import annotations

import os
from pathlib import Path

from mercator.utils.logging_config import get_logger

logger = get_logger(__name__)

GIT_METADATA_DIR = ".git"


def normalize_path(path: str) -> str:
    """Collapse redundant separators and ``.``/``..`` segments of ``path``."""
    return os.path.normpath(path)


def ensure_directory_exists_or_create(path: Path) -> None:
    """Ensure the directory exists, creating it if necessary.

    Parameters
    ----------
    path : Path
        The path to ensure exists.

    Raises
    ------
    OSError
        If the directory cannot be created.

    """
    if path.is_dir():
        return

    logger.debug("Creating directory", extra={"path": str(path)})
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"Failed to create directory {path}: {exc}"
        raise OSError(msg) from exc


def is_initialized_repository(path: Path) -> bool:
    """Return ``True`` if ``path`` already holds git metadata."""
    return (path / GIT_METADATA_DIR).exists()


def is_empty_directory(path: Path) -> bool:
    """Return ``True`` if the directory at ``path`` has no entries."""
    return next(path.iterdir(), None) is None
