"""
samepic
=======
Groups similar photos into piles so redundant shots are easy to discard.

Features:
- Perceptual hash + capture time fingerprints
- Piles formed from the transitive closure of pairwise matches
- Hard-linked pile directories with a statistics report
- Collect curated piles back into one folder
- Bounded LRU cache for interactive preview

Author: Zach
"""

__version__ = "1.0.0"
__author__ = "Zedidence"

from .models import Image, Pile, PileStats
from .config import DEFAULT_HASH_THRESHOLD, DEFAULT_TIME_WINDOW_MINUTES
from .exceptions import (
    SamepicError,
    LoadError,
    ImageIOError,
    InvalidImageError,
    LinkError,
    ConfigurationError,
)
from .scanner import (
    find_files,
    read_timestamp,
    compute_hash,
    load_image,
    load_images_parallel,
)
from .clustering import ClusterConfig, DisjointSet, is_match, find_matching_pairs, form_piles
from .materializer import create_piles, compute_stats, write_report
from .handle_cache import HandleCache, HandleKey
from .preview import PreviewService

__all__ = [
    "Image",
    "Pile",
    "PileStats",
    "DEFAULT_HASH_THRESHOLD",
    "DEFAULT_TIME_WINDOW_MINUTES",
    "SamepicError",
    "LoadError",
    "ImageIOError",
    "InvalidImageError",
    "LinkError",
    "ConfigurationError",
    "find_files",
    "read_timestamp",
    "compute_hash",
    "load_image",
    "load_images_parallel",
    "ClusterConfig",
    "DisjointSet",
    "is_match",
    "find_matching_pairs",
    "form_piles",
    "create_piles",
    "compute_stats",
    "write_report",
    "HandleCache",
    "HandleKey",
    "PreviewService",
]
