"""
Input validation for samepic.

Validators raise ConfigurationError with a human-readable message so the
CLI can abort before any clustering work begins.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional

from ..config import HASH_ALGORITHMS
from ..exceptions import ConfigurationError


def validate_source_directory(directory: str | Path) -> Path:
    """
    Validate that a source directory exists and is readable.

    Returns:
        The directory as a Path

    Raises:
        ConfigurationError: If the path is missing, not a directory or unreadable
    """
    path = Path(directory)

    if not path.exists():
        raise ConfigurationError(f"Source not found: {path}")

    if not path.is_dir():
        raise ConfigurationError(f"Source is not a directory: {path}")

    if not os.access(path, os.R_OK):
        raise ConfigurationError(f"Cannot read directory (permission denied): {path}")

    return path


def default_destination(source: Path, suffix: str) -> Path:
    """
    Sibling of `source` named `{source name}-{suffix}`.

    Examples:
        >>> default_destination(Path('/photos/holiday'), 'sorted')
        PosixPath('/photos/holiday-sorted')
    """
    source = Path(source).absolute()
    if source.name:
        return source.with_name(f"{source.name}-{suffix}")
    return source / suffix


def prepare_destination(
    destination: Optional[str | Path],
    source: Path,
    suffix: str,
) -> Path:
    """
    Resolve, create and check the destination directory.

    Args:
        destination: Requested destination, or None for the default sibling
        source: Source directory the default is derived from
        suffix: Suffix of the default destination name

    Returns:
        The existing, empty destination directory

    Raises:
        ConfigurationError: If it cannot be created or is not empty
    """
    path = Path(destination) if destination is not None else default_destination(source, suffix)

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Cannot create directory {path}: {e}") from e

    if not path.is_dir():
        raise ConfigurationError(f"Destination is not a directory: {path}")

    if any(path.iterdir()):
        raise ConfigurationError(
            f"Target directory not empty: {path}. "
            "Pass an empty or non-existent target directory."
        )

    return path


def validate_opener(opener: Optional[str]) -> Optional[str]:
    """
    Resolve an opener program to an executable path.

    Returns:
        Absolute path of the executable, or None if no opener was given

    Raises:
        ConfigurationError: If the program cannot be found
    """
    if not opener:
        return None
    resolved = shutil.which(opener)
    if resolved is None:
        raise ConfigurationError(f"Opener program not found: {opener}")
    return resolved


def validate_threshold(threshold: int, hash_bits: int) -> int:
    """
    Validate that a hash threshold fits the hash width.

    Raises:
        ConfigurationError: If outside 0..hash_bits + 1
    """
    try:
        threshold = int(threshold)
    except (ValueError, TypeError):
        raise ConfigurationError("Threshold must be an integer") from None
    # Distance is compared with <, so hash_bits + 1 accepts everything
    if not 0 <= threshold <= hash_bits + 1:
        raise ConfigurationError(f"Threshold must be between 0 and {hash_bits + 1}")
    return threshold


def validate_hash_params(hash_size: int, algorithm: str) -> None:
    """
    Validate the perceptual hash settings.

    Raises:
        ConfigurationError: On an unknown algorithm or unusable hash size
    """
    if algorithm not in HASH_ALGORITHMS:
        raise ConfigurationError(
            f"Unknown hash algorithm '{algorithm}' (choose from {', '.join(HASH_ALGORITHMS)})"
        )

    # whash needs a power of two
    if hash_size < 2 or (algorithm == 'whash' and hash_size & (hash_size - 1)):
        raise ConfigurationError(f"Invalid hash size {hash_size} for {algorithm}")


def validate_scan_params(
    threshold: int,
    minutes: float,
    hash_size: int,
    algorithm: str,
    workers: int,
) -> None:
    """
    Validate all clustering parameters.

    Raises:
        ConfigurationError: On the first invalid parameter
    """
    validate_hash_params(hash_size, algorithm)
    validate_threshold(threshold, hash_size * hash_size)

    if minutes <= 0:
        raise ConfigurationError("Time window must be positive")

    if not 1 <= workers <= 64:
        raise ConfigurationError("Workers must be between 1 and 64")


__all__ = [
    'validate_source_directory',
    'default_destination',
    'prepare_destination',
    'validate_opener',
    'validate_threshold',
    'validate_hash_params',
    'validate_scan_params',
]
