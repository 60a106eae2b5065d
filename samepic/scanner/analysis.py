"""
Image analysis module for the scanner package.

Loads a single file into a fingerprinted Image: reads the bytes once,
decodes them, extracts the capture time and computes the perceptual hash.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from ..config import DEFAULT_HASH_ALGORITHM, DEFAULT_HASH_SIZE
from ..exceptions import ConfigurationError, ImageIOError, InvalidImageError
from ..models import Image as ImageRecord
from .dependencies import Image, UnidentifiedImageError
from .hashing import compute_hash
from .timestamps import filesystem_timestamp, timestamp_from_exif

logger = logging.getLogger(__name__)


def load_image(
    filepath: str | Path,
    hash_size: int = DEFAULT_HASH_SIZE,
    algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> ImageRecord:
    """
    Load an image file and fingerprint it.

    Args:
        filepath: Path to the image file
        hash_size: Perceptual hash side length
        algorithm: Perceptual hash algorithm name

    Returns:
        Image record with path, timestamp and perceptual hash

    Raises:
        ImageIOError: If the file cannot be read
        InvalidImageError: If the file cannot be decoded as an image
    """
    filepath = str(filepath)

    try:
        with open(filepath, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ImageIOError(filepath, str(e)) from e

    try:
        with Image.open(io.BytesIO(data)) as img:
            # Force load to detect truncated/corrupt images early
            img.load()

            try:
                timestamp = timestamp_from_exif(img.getexif())
            except Exception as exif_err:
                logger.debug(f"Invalid EXIF data in {filepath}: {exif_err}")
                timestamp = None

            perceptual_hash = compute_hash(img, hash_size=hash_size, algorithm=algorithm)
    except ConfigurationError:
        raise
    except UnidentifiedImageError as e:
        raise InvalidImageError(filepath, f"not a valid image file: {e}") from e
    except Image.DecompressionBombError as e:
        raise InvalidImageError(filepath, f"image too large: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise InvalidImageError(filepath, f"corrupt or truncated image: {e}") from e
    except Exception as e:
        # Decoder plugins raise arbitrary types (EOFError, struct.error, IndexError)
        raise InvalidImageError(filepath, f"failed to decode image: {e}") from e

    if timestamp is None:
        timestamp = filesystem_timestamp(filepath)

    return ImageRecord(path=filepath, timestamp=timestamp, perceptual_hash=perceptual_hash)


__all__ = ['load_image']
