"""
Filesystem helpers used by the scanner, executor and manifest writer.

Every filesystem side effect of the organizer goes through this module.
"""

import os
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def path_exists(path: PathLike) -> bool:
    """Check whether anything exists at a path (file, directory or link)."""
    return os.path.lexists(path)


def read_text(path: PathLike) -> str:
    """Read a UTF-8 text file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def write_text(path: PathLike, content: str) -> None:
    """Write a UTF-8 text file, creating parent directories if needed.

    Args:
        path: Destination file
        content: Text to write
    """
    ensure_directory(os.path.dirname(os.path.abspath(path)))
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def append_text(path: PathLike, content: str) -> None:
    """Append text to a UTF-8 file."""
    with open(path, "a", encoding="utf-8") as f:
        f.write(content)


def ensure_directory(directory_path: PathLike) -> Path:
    """Ensure a directory exists, create if necessary.

    Safe to call repeatedly for the same directory.

    Args:
        directory_path: Path to directory

    Returns:
        Path object for the directory
    """
    path = Path(directory_path)
    if not path.exists():
        logger.debug(f"Creating directory: {path}")
        path.mkdir(parents=True, exist_ok=True)
    return path


def rename_path(source: PathLike, destination: PathLike) -> None:
    """Atomically rename a file within one filesystem."""
    os.rename(source, destination)


def stat_file(path: PathLike) -> os.stat_result:
    """Stat a path, following symlinks."""
    return os.stat(path)


def human_readable_size(size_bytes: int) -> str:
    """Convert bytes to human readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human readable size string
    """
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"


def same_file(first: PathLike, second: PathLike) -> bool:
    """Check whether two paths refer to the same existing file."""
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False
