"""
Pile materialization for samepic.

Creates one directory per pile under a destination root and hard links
every member into it, then computes and persists run statistics.
"""

from __future__ import annotations

import logging
import os
from collections import Counter
from datetime import datetime, timedelta
from pathlib import Path

from .config import PILE_DATE_FORMAT, REPORT_FILENAME
from .exceptions import LinkError
from .models import Pile, PileStats
from .utils.formatters import format_duration

logger = logging.getLogger(__name__)


def pile_directory_names(piles: list[Pile]) -> list[str]:
    """
    Directory name for each pile, in the same order.

    Names are `{date}_{n:04d}` where n counts earlier piles sharing the
    same date, so the first pile of a day gets 0000, the next 0001, ...

    Examples:
        >>> pile_directory_names([pile_a, pile_b])  # both on 2023-07-14
        ['2023-07-14_0000', '2023-07-14_0001']
    """
    seen: Counter = Counter()
    names = []
    for pile in piles:
        day = pile.date.strftime(PILE_DATE_FORMAT)
        names.append(f"{day}_{seen[day]:04d}")
        seen[day] += 1
    return names


def _link(source: str, target: Path) -> None:
    if target.exists():
        raise LinkError(source, str(target), "link target already exists")
    try:
        os.link(source, target)
    except OSError as e:
        raise LinkError(source, str(target), e.strerror or str(e)) from e


def create_piles(piles: list[Pile], destination: str | Path) -> list[Path]:
    """
    Create a directory per pile and hard link its images into it.

    Args:
        piles: Final piles
        destination: Existing, writable destination root

    Returns:
        Created pile directories, in pile order

    Raises:
        LinkError: If a directory or link cannot be created
    """
    destination = Path(destination)
    created = []

    for pile, name in zip(piles, pile_directory_names(piles)):
        pile_dir = destination / name
        try:
            pile_dir.mkdir()
        except OSError as e:
            first = next(iter(pile)).path
            raise LinkError(first, str(pile_dir), f"cannot create pile directory: {e}") from e

        for image in pile:
            _link(image.path, pile_dir / image.filename)

        logger.debug(f"Created pile {pile_dir} with {len(pile)} images")
        created.append(pile_dir)

    logger.info(f"Created {len(created):,} pile directories in {destination}")
    return created


def compute_stats(piles: list[Pile]) -> PileStats:
    """
    Calculate aggregate statistics over the final piles.

    Args:
        piles: Final piles

    Returns:
        PileStats (all zeros for an empty list)
    """
    if not piles:
        return PileStats()

    sizes = sorted(len(pile) for pile in piles)
    longest = max((pile.time_spread for pile in piles), default=timedelta(0))

    return PileStats(
        image_count=sum(sizes),
        pile_count=len(sizes),
        average_size=sum(sizes) / len(sizes),
        median_size=sizes[len(sizes) // 2],
        max_size=sizes[-1],
        longest_spread_minutes=int(longest.total_seconds() // 60),
        size_histogram=dict(sorted(Counter(sizes).items())),
    )


def format_stats(stats: PileStats) -> list[str]:
    """Human-readable statistics lines."""
    return [
        f"Image count: {stats.image_count:,}",
        f"Pile count: {stats.pile_count:,}",
        f"Pile size (Avg/Med/Max): {stats.average_size:.2f}/{stats.median_size}/{stats.max_size}",
        f"Single-image piles: {stats.singleton_count:,}",
        f"Longest time delta: {stats.longest_spread_minutes}min",
    ]


def log_stats(stats: PileStats) -> None:
    logger.info("===== PILE STATS =====")
    for line in format_stats(stats):
        logger.info(line)


def write_report(
    destination: str | Path,
    stats: PileStats,
    started_at: datetime,
    duration: timedelta,
) -> Path:
    """
    Persist the run statistics as plain text in the destination root.

    Args:
        destination: Destination root
        stats: Aggregate pile statistics
        started_at: When the run started
        duration: How long the run took

    Returns:
        Path of the written report
    """
    report_path = Path(destination) / REPORT_FILENAME

    lines = [
        "samepic run report",
        "=" * 40,
        f"Run started: {started_at:%Y-%m-%d %H:%M:%S}",
        f"Run duration: {format_duration(duration.total_seconds())}",
        "",
        *format_stats(stats),
        "",
        "Pile size distribution:",
    ]
    for size, count in stats.size_histogram.items():
        lines.append(f"  {size:>4} images: {count:,} piles")

    report_path.write_text("\n".join(lines) + "\n", encoding='utf-8')
    logger.info(f"Report written to {report_path}")
    return report_path


__all__ = [
    'pile_directory_names',
    'create_piles',
    'compute_stats',
    'format_stats',
    'log_stats',
    'write_report',
]
