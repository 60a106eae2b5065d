"""
File discovery module for the scanner package.

Enumerates every regular file below a source root. No extension filter is
applied: files that turn out not to be images fail at load time and are
skipped there.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def find_files(root_path: str | Path, recursive: bool = True) -> list[str]:
    """
    Find all regular files in the given directory.

    Args:
        root_path: Directory path to search
        recursive: If True, search subdirectories recursively

    Returns:
        Sorted list of absolute file paths as strings

    Notes:
        - Unreadable subdirectories are logged and skipped
        - Symlinked files are resolved and deduplicated
    """
    root = Path(root_path)

    def _on_error(err: OSError) -> None:
        logger.warning(f"Skipping unreadable path {err.filename}: {err.strerror}")

    files = []
    seen = set()  # Track resolved paths to avoid duplicates

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        if not recursive:
            dirnames.clear()
        for name in filenames:
            filepath = Path(dirpath) / name
            if not filepath.is_file():
                continue
            resolved = str(filepath.resolve())
            if resolved not in seen:
                seen.add(resolved)
                files.append(resolved)

    files.sort()
    return files


__all__ = ['find_files']
