"""
Platform-specific capability checks for samepic.

Hard links only work within one filesystem, so sorting into a
destination on another device must be refused up front.
"""

from __future__ import annotations

import os
import platform as platform_module
import subprocess
import sys
from pathlib import Path


def check_hardlink_support(source: Path, dest_dir: Path) -> tuple[bool, str]:
    """
    Check if hardlinks are supported between source and destination.

    Args:
        source: Source file or directory
        dest_dir: Destination directory

    Returns:
        Tuple of (is_supported, reason_if_not)

    Examples:
        >>> check_hardlink_support(Path('/data/photos'), Path('/data/sorted'))
        (True, '')
        >>> check_hardlink_support(Path('/data/photos'), Path('/mnt/external/'))
        (False, 'Source and destination are on different filesystems')
    """
    try:
        source_dev = os.stat(source).st_dev
        dest_dev = os.stat(dest_dir).st_dev
    except OSError as e:
        return False, f"Cannot check filesystem: {e}"

    if source_dev != dest_dev:
        return False, "Source and destination are on different filesystems"

    return True, ""


def open_with_default_program(path: Path) -> None:
    """
    Open a file or folder with the operating system's default program.

    Raises:
        OSError: If the opener cannot be launched
    """
    system = platform_module.system()
    if system == 'Windows':
        os.startfile(str(path))  # type: ignore[attr-defined]
    elif system == 'Darwin':
        subprocess.Popen(['open', str(path)])
    else:
        subprocess.Popen(['xdg-open', str(path)],
                         stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)


def pause(prompt: str = "Press enter to continue...") -> None:
    """Wait for the user to press enter, keeping the cursor on the prompt line."""
    sys.stdout.write(prompt)
    sys.stdout.flush()
    sys.stdin.readline()


__all__ = [
    'check_hardlink_support',
    'open_with_default_program',
    'pause',
]
