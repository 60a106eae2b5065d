"""
Pile review for the CLI interface.

Walks the materialized pile directories in lexicographic order and shows
each one, either with a user-supplied program or with the operating
system's default file opener.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..exceptions import ConfigurationError
from ..utils.platform import open_with_default_program, pause

logger = logging.getLogger(__name__)


@dataclass
class OpenOptions:
    """
    How piles are shown.

    Attributes:
        opener: Resolved executable to spawn per pile (None = OS default)
        skip_to: Start at the first directory named >= this
        skip_singletons: Skip piles holding a single file
    """
    opener: Optional[str] = None
    skip_to: Optional[str] = None
    skip_singletons: bool = False


def list_piles(path: Path, options: OpenOptions) -> list[Path]:
    """
    Pile directories to show, in lexicographic order.

    Non-directories (such as the run report) are ignored.
    """
    piles = sorted((entry for entry in Path(path).iterdir() if entry.is_dir()),
                   key=lambda entry: entry.name)

    if options.skip_to:
        piles = [pile for pile in piles if pile.name >= options.skip_to]

    if options.skip_singletons:
        piles = [pile for pile in piles if sum(1 for _ in pile.iterdir()) > 1]

    return piles


def spawn_process(exe: str, arg: Path) -> None:
    """
    Run `exe arg` and wait for it to exit.

    Raises:
        ConfigurationError: If the program cannot be launched
    """
    try:
        subprocess.run(
            [exe, str(arg)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        raise ConfigurationError(f"Failed to launch opener {exe}: {e}") from e


def open_piles(path: Path, options: OpenOptions) -> int:
    """
    Show every pile directory under path.

    Args:
        path: Folder holding the pile directories
        options: Opener and filtering options

    Returns:
        Number of piles shown
    """
    piles = list_piles(path, options)
    logger.info(f"Reviewing {len(piles):,} piles in {path}")

    for pile in piles:
        logger.info(f"Showing pile {pile}")
        if options.opener:
            spawn_process(options.opener, pile)
        else:
            open_with_default_program(pile)
            pause()

    return len(piles)


__all__ = ['OpenOptions', 'list_piles', 'spawn_process', 'open_piles']
