"""
Parallel processing module for the scanner package.

Provides parallel image loading with progress tracking and callback support.
Per-file failures are logged and collected, never raised.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Callable

from ..config import DEFAULT_HASH_ALGORITHM, DEFAULT_HASH_SIZE, DEFAULT_WORKERS
from ..exceptions import LoadError
from ..models import Image
from .analysis import load_image
from .dependencies import progress_bar

logger = logging.getLogger(__name__)


def load_images_parallel(
    filepaths: list[str],
    max_workers: int = DEFAULT_WORKERS,
    hash_size: int = DEFAULT_HASH_SIZE,
    algorithm: str = DEFAULT_HASH_ALGORITHM,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
) -> tuple[list[Image], list[LoadError]]:
    """
    Load and fingerprint multiple images in parallel.

    Args:
        filepaths: List of file paths to load
        max_workers: Number of parallel workers
        hash_size: Perceptual hash side length for the whole run
        algorithm: Perceptual hash algorithm for the whole run
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar

    Returns:
        Tuple of (images sorted by path, load errors sorted by path)
    """
    if not filepaths:
        return [], []

    images: list[Image] = []
    failures: list[LoadError] = []

    pbar = progress_bar(len(filepaths), "Loading images", "img", enabled=show_progress)

    # Batch progress callbacks to reduce overhead (every 1000 files or 1 second)
    last_callback_time = time.time()
    callback_batch_size = 1000
    callback_interval = 1.0  # seconds

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(load_image, path, hash_size, algorithm): path
            for path in filepaths
        }

        for i, future in enumerate(as_completed(futures)):
            try:
                images.append(future.result())
            except LoadError as e:
                logger.warning(str(e))
                failures.append(e)

            if pbar is not None:
                pbar.update(1)

            if progress_callback:
                current_time = time.time()
                should_callback = (
                    (i + 1) % callback_batch_size == 0 or
                    current_time - last_callback_time >= callback_interval or
                    i == len(filepaths) - 1  # Always callback on last item
                )
                if should_callback:
                    progress_callback(i + 1, len(filepaths))
                    last_callback_time = current_time

    if pbar is not None:
        pbar.close()

    # Completion order is arbitrary, stabilize it
    images.sort(key=lambda img: img.path)
    failures.sort(key=lambda err: err.path)

    logger.info(f"Loaded {len(images):,} images ({len(failures):,} skipped)")
    return images, failures


__all__ = ['load_images_parallel']
