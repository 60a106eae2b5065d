"""
Preview rendering for interactive pile review.

Renders bounded-size thumbnails with Pillow and keeps recently viewed
ones in a HandleCache so stepping back and forth through a pile does not
re-decode the same files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import DEFAULT_PREVIEW_SIDE
from .exceptions import InvalidImageError, ImageIOError
from .handle_cache import HandleCache, HandleKey
from .user_config import get_user_config
from .scanner.dependencies import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def render_thumbnail(path: str | Path, max_side: int = DEFAULT_PREVIEW_SIDE) -> Image.Image:
    """
    Decode an image and shrink it to fit within max_side x max_side.

    Raises:
        ImageIOError: If the file cannot be read
        InvalidImageError: If the file cannot be decoded
    """
    try:
        with Image.open(path) as img:
            img.load()
            thumb = img.convert('RGB') if img.mode not in ('RGB', 'L') else img.copy()
    except FileNotFoundError as e:
        raise ImageIOError(str(path), str(e)) from e
    except UnidentifiedImageError as e:
        raise InvalidImageError(str(path), f"not a valid image file: {e}") from e
    except Image.DecompressionBombError as e:
        raise InvalidImageError(str(path), f"image too large: {e}") from e
    except OSError as e:
        raise InvalidImageError(str(path), f"corrupt or truncated image: {e}") from e

    thumb.thumbnail((max_side, max_side))
    return thumb


class PreviewService:
    """
    Thumbnail provider backed by a bounded LRU cache.

    Each path is assigned a HandleKey on first request; the rendered
    thumbnail may later be evicted, in which case it is rendered again
    under the same key.
    """

    def __init__(self, capacity: Optional[int] = None, max_side: int = DEFAULT_PREVIEW_SIDE):
        if capacity is None:
            capacity = get_user_config().cache_capacity
        self.max_side = max_side
        self._cache: HandleCache[Image.Image] = HandleCache(capacity)
        self._keys: dict[str, HandleKey] = {}
        self.renders = 0

    @property
    def capacity(self) -> int:
        return self._cache.capacity

    def _render(self, path: str) -> Image.Image:
        self.renders += 1
        logger.debug(f"Rendering preview for {path}")
        return render_thumbnail(path, self.max_side)

    def get_preview(self, path: str | Path) -> Image.Image:
        """Return the thumbnail for path, rendering it if not cached."""
        path = str(path)
        key = self._keys.get(path)
        if key is None:
            thumb = self._render(path)
            self._keys[path] = self._cache.push(thumb)
            return thumb
        return self._cache.get_or_insert(key, lambda: self._render(path))

    def is_cached(self, path: str | Path) -> bool:
        key = self._keys.get(str(path))
        return key is not None and key in self._cache

    def __len__(self) -> int:
        return len(self._cache)


__all__ = ['render_thumbnail', 'PreviewService']
