"""
Capture time extraction for the scanner package.

Looks up EXIF date/time tags in priority order and falls back to
filesystem timestamps when no tag holds a valid value.
"""

from __future__ import annotations

import io
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

from ..config import (
    EXIF_DATETIME_FORMAT,
    EXIF_TIMESTAMP_TAGS,
)
from ..exceptions import ImageIOError
from .dependencies import Image, ExifTags

logger = logging.getLogger(__name__)


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an EXIF ASCII date/time value.

    Args:
        value: Raw tag value ("YYYY:MM:DD HH:MM:SS", str or bytes)

    Returns:
        Parsed datetime, or None if the value is not a valid date/time
    """
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='ignore')
    if not isinstance(value, str):
        return None
    value = value.strip('\x00 ')
    try:
        return datetime.strptime(value, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def _segments(exif) -> Iterator[dict]:
    """
    Yield the primary and thumbnail tag segments.

    The primary segment merges IFD0 with its Exif sub-IFD, which is
    where DateTimeOriginal and DateTimeDigitized normally live.
    """
    primary = dict(exif)
    try:
        for tag, value in exif.get_ifd(ExifTags.IFD.Exif).items():
            primary.setdefault(tag, value)
    except Exception as e:
        logger.debug(f"Unreadable Exif sub-IFD: {e}")
    yield primary

    try:
        yield dict(exif.get_ifd(ExifTags.IFD.IFD1))
    except Exception as e:
        logger.debug(f"Unreadable thumbnail IFD: {e}")


def timestamp_from_exif(exif) -> Optional[datetime]:
    """
    Find the first valid capture time in an EXIF container.

    Tags are tried in priority order (DateTimeOriginal, DateTime,
    DateTimeDigitized); for each tag the primary segment is consulted
    before the thumbnail segment.

    Args:
        exif: A PIL.Image.Exif instance (or any mapping with get_ifd)

    Returns:
        The first syntactically valid datetime, or None
    """
    segments = list(_segments(exif))
    for tag in EXIF_TIMESTAMP_TAGS:
        for segment in segments:
            parsed = parse_exif_datetime(segment.get(tag))
            if parsed is not None:
                return parsed
    return None


def filesystem_timestamp(filepath: str | Path) -> datetime:
    """
    Creation time of the file, or last-access time where the platform
    does not record creation time.

    Raises:
        ImageIOError: If the file cannot be stat'ed
    """
    try:
        st = os.stat(filepath)
    except OSError as e:
        raise ImageIOError(str(filepath), f"cannot stat file: {e}") from e

    created = getattr(st, 'st_birthtime', None)
    if created is not None:
        return datetime.fromtimestamp(created)
    return datetime.fromtimestamp(st.st_atime)


def read_timestamp(filepath: str | Path, data: Optional[bytes] = None) -> datetime:
    """
    Best-effort capture time of an image file.

    Args:
        filepath: Path to the image
        data: File contents if already read (avoids a second read)

    Returns:
        EXIF capture time if present and valid, filesystem time otherwise

    Raises:
        ImageIOError: If the file cannot be read at all
    """
    if data is None:
        try:
            data = Path(filepath).read_bytes()
        except OSError as e:
            raise ImageIOError(str(filepath), str(e)) from e

    try:
        with Image.open(io.BytesIO(data)) as img:
            timestamp = timestamp_from_exif(img.getexif())
    except Exception as e:
        # Corrupt or missing metadata is not fatal
        logger.debug(f"EXIF read failed for {filepath}: {e}")
        timestamp = None

    if timestamp is None:
        timestamp = filesystem_timestamp(filepath)
    return timestamp


__all__ = [
    'parse_exif_datetime',
    'timestamp_from_exif',
    'filesystem_timestamp',
    'read_timestamp',
]
