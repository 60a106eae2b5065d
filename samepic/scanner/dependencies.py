"""
Third-party imports shared by the scanner and clustering code.

Pillow and imagehash are required. HEIC/HEIF decoding (pillow-heif) and
progress bars (tqdm) are used when installed.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Optional

logger = logging.getLogger(__name__)

try:
    from PIL import Image, ExifTags, UnidentifiedImageError
    import imagehash
except ImportError:
    raise ImportError(
        "samepic needs Pillow and imagehash.\n"
        "Install with: pip install Pillow imagehash"
    )

# Openers must be registered before the first Image.open
HAS_HEIF_SUPPORT = False
try:
    from pillow_heif import register_heif_opener
    register_heif_opener()
    HAS_HEIF_SUPPORT = True
    logger.debug("HEIC/HEIF decoding enabled via pillow-heif")
except ImportError:
    logger.debug("pillow-heif not installed, HEIC/HEIF photos will be skipped as undecodable")

# Panoramas and phone photos exceed PIL's default ~89MP bomb limit
Image.MAX_IMAGE_PIXELS = 500_000_000
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

HAS_TQDM = False
try:
    from tqdm import tqdm
    HAS_TQDM = True
except ImportError:
    tqdm = None


def progress_bar(total: int, desc: str, unit: str, enabled: bool = True) -> Optional[Any]:
    """
    A tqdm bar, or None when disabled or tqdm is not installed.

    Callers must check for None before update()/close().
    """
    if not (enabled and HAS_TQDM):
        return None
    return tqdm(total=total, desc=desc, unit=unit, ncols=80)


__all__ = [
    'Image',
    'ExifTags',
    'UnidentifiedImageError',
    'imagehash',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'progress_bar',
]
