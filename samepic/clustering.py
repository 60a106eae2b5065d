"""
Pile formation for samepic.

Turns pairwise similarity judgments into a partition of the image set.
Two images are related when their perceptual hashes are close AND they
were taken close together in time. Piles are the transitive closure of
that relation, tracked with a disjoint-set (union-find) over image
ordinals so that merging two piles never moves elements between
containers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from itertools import combinations
from typing import Iterator, Optional

from .config import DEFAULT_HASH_THRESHOLD, DEFAULT_TIME_WINDOW_MINUTES
from .exceptions import ConfigurationError
from .models import Image, Pile
from .scanner.dependencies import progress_bar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterConfig:
    """
    Match predicate settings for one run.

    Attributes:
        hash_threshold: Hamming distance must be strictly below this
        time_window: Capture time delta must be strictly below this
    """
    hash_threshold: int = DEFAULT_HASH_THRESHOLD
    time_window: timedelta = timedelta(minutes=DEFAULT_TIME_WINDOW_MINUTES)

    def __post_init__(self):
        if self.hash_threshold < 0:
            raise ConfigurationError(f"Hash threshold must not be negative (got {self.hash_threshold})")
        if self.time_window <= timedelta(0):
            raise ConfigurationError(f"Time window must be positive (got {self.time_window})")

    @classmethod
    def from_minutes(cls, hash_threshold: int, minutes: float) -> 'ClusterConfig':
        """Build a config from a time window given in minutes."""
        return cls(hash_threshold=hash_threshold, time_window=timedelta(minutes=minutes))


def is_match(a: Image, b: Image, config: ClusterConfig) -> bool:
    """
    Check whether two images are related.

    Both conditions are required: hash distance below the threshold and
    timestamps within the time window. An image always matches itself.
    """
    if a == b:
        return True
    return (
        abs(a.timestamp - b.timestamp) < config.time_window
        and a.hash_distance(b) < config.hash_threshold
    )


def _hash_as_int(image: Image) -> int:
    return int(str(image.perceptual_hash), 16)


def _check_hash_width(images: list[Image]) -> None:
    widths = {img.perceptual_hash.hash.size for img in images}
    if len(widths) > 1:
        raise ValueError(f"Perceptual hashes of different widths in one run: {sorted(widths)}")


def find_matching_pairs(
    images: list[Image],
    config: ClusterConfig,
    show_progress: bool = False,
) -> Iterator[tuple[int, int]]:
    """
    Yield ordinal pairs of matching images.

    Every unordered pair (i, j) with i < j that matches is yielded first,
    followed by a self-pair (i, i) for every image so that images matching
    nothing still end up in a pile.

    Args:
        images: Fingerprinted images (all hashes of the same width)
        config: Match predicate settings
        show_progress: Whether to show tqdm progress bar

    Yields:
        (i, j) ordinals into `images`
    """
    _check_hash_width(images)

    # Integer XOR + popcount avoids numpy overhead per comparison
    hashes = [_hash_as_int(img) for img in images]
    timestamps = [img.timestamp for img in images]
    window = config.time_window
    threshold = config.hash_threshold

    n = len(images)
    total_comparisons = (n * (n - 1)) // 2

    pbar = progress_bar(total_comparisons, "Comparing images", "cmp",
                        enabled=show_progress and total_comparisons > 1000)

    comparison_count = 0
    for i, j in combinations(range(n), 2):
        comparison_count += 1
        if pbar is not None and comparison_count % 1000 == 0:
            pbar.update(1000)

        if abs(timestamps[i] - timestamps[j]) >= window:
            continue
        if bin(hashes[i] ^ hashes[j]).count('1') < threshold:
            yield i, j

    if pbar is not None:
        pbar.update(comparison_count % 1000)
        pbar.close()

    for i in range(n):
        yield i, i


class DisjointSet:
    """
    Union-find over the ordinals 0..n-1.

    Uses path compression and union by size.
    """

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.size = [1] * n

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        """
        Merge the sets containing x and y.

        Returns:
            True if two distinct sets were merged, False if already joined
        """
        px, py = self.find(x), self.find(y)
        if px == py:
            return False
        if self.size[px] < self.size[py]:
            px, py = py, px
        self.parent[py] = px
        self.size[px] += self.size[py]
        return True

    def connected(self, x: int, y: int) -> bool:
        return self.find(x) == self.find(y)

    def size_of(self, x: int) -> int:
        """Number of elements in the set containing x."""
        return self.size[self.find(x)]

    def groups(self) -> list[list[int]]:
        """All sets as lists of ordinals, in order of first member."""
        by_root: dict[int, list[int]] = {}
        for x in range(len(self.parent)):
            by_root.setdefault(self.find(x), []).append(x)
        return list(by_root.values())


def form_piles(
    images: list[Image],
    config: Optional[ClusterConfig] = None,
    show_progress: bool = False,
) -> list[Pile]:
    """
    Partition images into piles of related photos.

    Matching pairs are applied one at a time:
    - neither image placed yet: new pile containing both
    - one image placed: the other joins its pile
    - both in the same pile: nothing to do
    - both in different piles: the piles merge

    The result is the transitive closure of the match relation, so the
    order in which pairs are visited does not change the partition.

    Args:
        images: Fingerprinted images; duplicates by path are collapsed
        config: Match predicate settings (defaults if None)
        show_progress: Whether to show tqdm progress bar

    Returns:
        Piles ordered by earliest timestamp, then smallest member path.
        Every input image appears in exactly one pile.
    """
    config = config or ClusterConfig()
    images = list(dict.fromkeys(images))

    logger.info(f"Clustering {len(images):,} images "
                f"(hash threshold {config.hash_threshold}, time window {config.time_window})")

    piles = DisjointSet(len(images))
    placed = [False] * len(images)
    match_count = 0

    # Merging mutates shared state, so this loop stays sequential
    for left, right in find_matching_pairs(images, config, show_progress=show_progress):
        if left != right:
            match_count += 1

        if not placed[left] and not placed[right]:
            piles.union(left, right)
            placed[left] = placed[right] = True
            logger.debug(f"Added {images[left]} to new pile")
            if left != right:
                logger.debug(f"Added {images[right]} to new pile")
        elif placed[left] and not placed[right]:
            piles.union(left, right)
            placed[right] = True
            logger.debug(f"Added {images[right]} to pile of {images[left]}")
        elif placed[right] and not placed[left]:
            piles.union(left, right)
            placed[left] = True
            logger.debug(f"Added {images[left]} to pile of {images[right]}")
        elif piles.union(left, right):
            logger.debug(f"Merged piles of {images[left]} and {images[right]} "
                         f"(now {piles.size_of(left)} images)")

    result = [Pile(images[i] for i in group) for group in piles.groups()]
    result.sort(key=lambda pile: (pile.earliest, min(img.path for img in pile.images)))

    logger.info(f"Formed {len(result):,} piles from {match_count:,} matching pairs")
    return result


__all__ = [
    'ClusterConfig',
    'is_match',
    'find_matching_pairs',
    'DisjointSet',
    'form_piles',
]
