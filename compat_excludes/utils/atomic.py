"""Atomic file writes for generated reports."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from compat_excludes.utils.logging import get_logger

logger = get_logger("utils.atomic")


class AtomicWriteError(Exception):
    """Raised when an atomic write operation fails."""

    pass


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write text to ``path`` through a temporary file and a rename.

    A reader never sees a half-written report; on failure the previous file
    is left untouched.

    Raises:
        AtomicWriteError: If the write or the rename fails
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(content)
        temp_path.replace(path)
    except OSError as e:
        logger.error("atomic_write_failed", path=str(path), error=str(e))
        if temp_path.exists():
            temp_path.unlink()
        raise AtomicWriteError(f"Failed to atomically write {path}: {e}") from e

    logger.debug("atomic_write_success", path=str(path))
