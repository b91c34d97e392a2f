"""
Filesystem utilities for directory and file management.
"""
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating parents as needed.

    Args:
        path: Directory to create

    Returns:
        Path: The same directory
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_bytes(path: Path, data: bytes) -> Path:
    """Write data to path, replacing whatever was there before."""
    ensure_directory(path.parent)
    with open(path, "wb") as f:
        f.write(data)
    return path


def is_executable_file(path: Path) -> bool:
    """True if path is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)
