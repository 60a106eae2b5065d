"""
Hashing module for the scanner package.

Provides perceptual hash calculation with a selectable imagehash
algorithm. The bit width is fixed for a whole run by `hash_size`.
"""

from __future__ import annotations

from ..config import DEFAULT_HASH_ALGORITHM, DEFAULT_HASH_SIZE, HASH_ALGORITHMS
from ..exceptions import ConfigurationError
from .dependencies import Image, imagehash

_HASH_FUNCTIONS = {
    'dhash': imagehash.dhash,
    'phash': imagehash.phash,
    'ahash': imagehash.average_hash,
    'whash': imagehash.whash,
}


def get_hash_function(algorithm: str):
    """
    Look up the imagehash function for an algorithm name.

    Raises:
        ConfigurationError: If the algorithm is unknown
    """
    try:
        return _HASH_FUNCTIONS[algorithm]
    except KeyError:
        raise ConfigurationError(
            f"Unknown hash algorithm '{algorithm}' (choose from {', '.join(HASH_ALGORITHMS)})"
        ) from None


def compute_hash(
    img: Image.Image,
    hash_size: int = DEFAULT_HASH_SIZE,
    algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> imagehash.ImageHash:
    """
    Calculate the perceptual hash of a decoded image.

    Args:
        img: Loaded PIL image
        hash_size: Hash side length (8 gives a 64-bit hash)
        algorithm: One of 'dhash', 'phash', 'ahash', 'whash'

    Returns:
        ImageHash with hash_size**2 bits
    """
    hash_function = get_hash_function(algorithm)

    # Convert to RGB if necessary (handles palettes, transparency, etc.)
    if img.mode not in ('RGB', 'L'):
        img = img.convert('RGB')

    return hash_function(img, hash_size=hash_size)


__all__ = [
    'get_hash_function',
    'compute_hash',
]
