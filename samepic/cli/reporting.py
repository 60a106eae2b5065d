"""
Report formatting and display for the CLI interface.

Provides functions to print the sort summary and the hash comparison
table in a human-readable format.
"""

from __future__ import annotations

from pathlib import Path

from ..exceptions import LoadError
from ..materializer import format_stats
from ..models import Image, PileStats


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def print_sort_summary(
    stats: PileStats,
    failures: list[LoadError],
    destination: Path,
) -> None:
    """
    Print the outcome of a sort run.

    Always shows the aggregate statistics, followed by every file that
    could not be loaded.
    """
    print("\n" + "=" * 70)
    print("SAMEPIC SORT REPORT")
    print("=" * 70)
    print(f"\nPiles created in: {destination}")
    for line in format_stats(stats):
        print(f"  {line}")

    print(f"\nSkipped files: {len(failures):,}")
    if failures:
        _print_section_header("SKIPPED FILES")
        for failure in failures:
            print(f"  {failure.path}: {failure.reason}")

    print("=" * 70)


def print_hash_table(images: list[Image]) -> None:
    """
    Print each image's hash and the pairwise Hamming distance matrix.

    Rows and columns are numbered in the order of the hash listing.
    """
    _print_section_header("HASHES")
    for i, img in enumerate(images):
        print(f"  [{i:>3}] {img.perceptual_hash}  {img.path}")

    if not images:
        return

    _print_section_header("HAMMING DISTANCE")
    width = max(4, len(str(len(images))) + 2)
    print(" " * width + "".join(f"{f'[{j}]':>{width}}" for j in range(len(images))))
    for i, row in enumerate(images):
        cells = "".join(f"{row.hash_distance(col):>{width}}" for col in images)
        print(f"{f'[{i}]':>{width}}{cells}")


__all__ = ['print_sort_summary', 'print_hash_table']
