"""
Collection of curated piles for the CLI interface.

After the user has deleted the unwanted shots from each pile, the
remaining images are hard linked back into one flat folder, optionally
renamed to their capture time.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ..config import FILENAME_DATETIME_FORMAT
from ..exceptions import LinkError
from ..scanner import read_timestamp

logger = logging.getLogger(__name__)


def generate_file_name(original: Path, target_dir: Path, keep_names: bool) -> Path:
    """
    Pick a free file name in target_dir for original.

    Args:
        original: Image being collected
        target_dir: Flat destination folder
        keep_names: Keep the original stem instead of the capture time

    Returns:
        A path in target_dir that does not exist yet; `-1`, `-2`, ... is
        appended to the stem on collision

    Examples:
        >>> generate_file_name(Path('piles/2023-07-14_0000/IMG_1.jpg'), Path('final'), False)
        PosixPath('final/2023-07-14T09-30-00.jpg')
    """
    if keep_names:
        stem = original.stem
    else:
        stem = read_timestamp(original).strftime(FILENAME_DATETIME_FORMAT)
    suffix = original.suffix

    link = target_dir / f"{stem}{suffix}"
    same_name_count = 0
    while link.exists():
        same_name_count += 1
        link = target_dir / f"{stem}-{same_name_count}{suffix}"
    return link


def collect(source: Path, destination: Path, keep_names: bool = False) -> int:
    """
    Hard link every image of every pile directory into destination.

    Args:
        source: Folder with the pile directories
        destination: Existing, empty destination folder
        keep_names: Keep original file names

    Returns:
        Number of images collected

    Raises:
        LinkError: If a link cannot be created
    """
    count = 0
    for pile_dir in sorted(Path(source).iterdir()):
        if not pile_dir.is_dir():
            logger.info(f"Skipping {pile_dir} because it is not a directory.")
            continue

        logger.info(f"Disassembling pile {pile_dir}")
        for image in sorted(pile_dir.iterdir()):
            if not image.is_file():
                continue
            link = generate_file_name(image, destination, keep_names)
            try:
                os.link(image, link)
            except OSError as e:
                raise LinkError(str(image), str(link), e.strerror or str(e)) from e
            count += 1

    logger.info(f"Collected {count:,} images into {destination}")
    return count


def remove_sorted_tree(source: Path) -> None:
    """Delete the pile folders once their images are collected."""
    logger.info(f"Removing {source}")
    shutil.rmtree(source)


__all__ = ['generate_file_name', 'collect', 'remove_sorted_tree']
