"""
Scanner package for samepic.

Turns files on disk into fingerprinted Image records.

Public API:
- find_files: Enumerate every regular file below a directory
- read_timestamp: Best-effort capture time of a file (EXIF, then filesystem)
- compute_hash: Perceptual hash of a decoded image
- load_image: Fingerprint a single file
- load_images_parallel: Fingerprint many files with a thread pool
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .file_discovery import find_files
from .timestamps import (
    parse_exif_datetime,
    timestamp_from_exif,
    filesystem_timestamp,
    read_timestamp,
)
from .hashing import compute_hash, get_hash_function
from .analysis import load_image
from .parallel import load_images_parallel

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # File discovery
    'find_files',
    # Timestamps
    'parse_exif_datetime',
    'timestamp_from_exif',
    'filesystem_timestamp',
    'read_timestamp',
    # Hashing
    'compute_hash',
    'get_hash_function',
    # Loading
    'load_image',
    'load_images_parallel',
    # Feature detection
    'has_heif_support',
]
