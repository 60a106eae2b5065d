"""
Data models for samepic.

Contains the fingerprinted Image record, the Pile cluster and the
aggregate statistics computed over a set of piles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Optional
import os

import imagehash


@dataclass(frozen=True, eq=False)
class Image:
    """
    A fingerprinted image file.

    Attributes:
        path: Absolute path to the image file (identity)
        timestamp: Best-effort capture time
        perceptual_hash: Fixed-width perceptual fingerprint
    """
    path: str
    timestamp: datetime
    perceptual_hash: imagehash.ImageHash

    def __post_init__(self):
        if not self.path:
            raise ValueError("Image path must not be empty")

    def __hash__(self):
        return hash(self.path)

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return self.path == other.path

    def __str__(self) -> str:
        return f"Image {self.path} at {self.timestamp:%A, %d %B %Y}"

    @property
    def filename(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    def hash_distance(self, other: Image) -> int:
        """Hamming distance between the two fingerprints."""
        return self.perceptual_hash - other.perceptual_hash


class Pile:
    """
    A non-empty set of related images.

    The pile date is derived from membership on every access and can
    never be set directly. A pile absorbed by merge() is consumed: every
    further use raises ValueError, so no empty pile is ever observable.
    """

    def __init__(self, images: Iterable[Image]):
        self._images: Optional[set[Image]] = set(images)
        if not self._images:
            raise ValueError("A pile needs at least one image")

    @property
    def _members(self) -> set[Image]:
        if self._images is None:
            raise ValueError("Pile was merged into another pile and can no longer be used")
        return self._images

    @property
    def consumed(self) -> bool:
        """True once this pile has been merged into another one."""
        return self._images is None

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, image: object) -> bool:
        return image in self._members

    def __iter__(self) -> Iterator[Image]:
        return iter(sorted(self._members, key=lambda img: (img.timestamp, img.path)))

    def __repr__(self) -> str:
        if self.consumed:
            return "Pile(consumed)"
        return f"Pile(date={self.date}, size={len(self)})"

    @property
    def images(self) -> frozenset[Image]:
        return frozenset(self._members)

    @property
    def earliest(self) -> datetime:
        """Earliest member timestamp."""
        return min(img.timestamp for img in self._members)

    @property
    def latest(self) -> datetime:
        return max(img.timestamp for img in self._members)

    @property
    def date(self) -> date:
        """Calendar date of the earliest member."""
        return self.earliest.date()

    @property
    def time_spread(self) -> timedelta:
        """Time between the earliest and latest member."""
        return self.latest - self.earliest

    def add(self, image: Image) -> None:
        self._members.add(image)

    def merge(self, other: Pile) -> None:
        """
        Absorb every member of `other`, consuming it.

        Raises:
            ValueError: If either pile was already consumed
        """
        if other is self:
            return
        self._members.update(other._members)
        other._images = None


@dataclass
class PileStats:
    """
    Aggregate statistics over a list of piles.

    Attributes:
        image_count: Total number of images across all piles
        pile_count: Number of piles
        average_size: Mean pile size
        median_size: Median pile size (upper median for even counts)
        max_size: Largest pile size
        longest_spread_minutes: Largest intra-pile time spread in minutes
    """
    image_count: int = 0
    pile_count: int = 0
    average_size: float = 0.0
    median_size: int = 0
    max_size: int = 0
    longest_spread_minutes: int = 0
    size_histogram: dict = field(default_factory=dict)

    @property
    def singleton_count(self) -> int:
        """Number of piles holding a single image."""
        return self.size_histogram.get(1, 0)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'image_count': self.image_count,
            'pile_count': self.pile_count,
            'average_size': round(self.average_size, 2),
            'median_size': self.median_size,
            'max_size': self.max_size,
            'longest_spread_minutes': self.longest_spread_minutes,
            'singleton_count': self.singleton_count,
        }
