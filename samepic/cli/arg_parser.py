"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
samepic command-line interface. Defaults come from the user configuration
(environment variables, ~/.samepic/config.json, built-in constants).
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .. import __version__
from ..config import HASH_ALGORITHMS
from ..user_config import get_user_config


def _add_open_options(parser: argparse.ArgumentParser, opener_default) -> None:
    """Options shared by `sort` and `open`."""
    parser.add_argument(
        '-o', '--opener',
        default=opener_default,
        help='Program to open the pile folders with. Default: the OS folder explorer'
    )
    parser.add_argument(
        '--skip-to',
        metavar='NAME',
        help='Start at the first pile directory whose name sorts at or after NAME'
    )
    parser.add_argument(
        '--skip-singletons',
        action='store_true',
        help='Do not open piles that contain a single image'
    )


def _add_hash_options(parser: argparse.ArgumentParser, config) -> None:
    parser.add_argument(
        '--hash-size',
        type=int,
        default=config.hash_size,
        help=f'Perceptual hash side length (bits = size^2). Default: {config.hash_size}'
    )
    parser.add_argument(
        '--algorithm',
        choices=HASH_ALGORITHMS,
        default=config.hash_algorithm,
        help=f'Perceptual hash algorithm. Default: {config.hash_algorithm}'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance with sort, open, collect,
        compare and config subcommands
    """
    config = get_user_config()

    parser = argparse.ArgumentParser(
        prog='samepic',
        description='Group similar images in joint folders so duplicates are easily deleteable',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sort /path/to/photos
      Sort photos into piles under /path/to/photos-sorted, then open each pile

  %(prog)s sort /path/to/photos -d /path/to/piles --no-open -t 8 -m 15
      Stricter matching, no folder opening

  %(prog)s open /path/to/photos-sorted --skip-singletons
      Review piles again without re-sorting

  %(prog)s collect /path/to/photos-sorted
      Gather the remaining images into /path/to/photos-sorted-final

Notes:
  Piles are hard links, so source and destination must be on the same filesystem.
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    # sort
    sort_parser = subparsers.add_parser(
        'sort',
        help='Group all the images in source into pile folders in a destination'
    )
    sort_parser.add_argument('source', type=Path, help='Source folder to be sorted')
    sort_parser.add_argument(
        '-d', '--destination',
        type=Path,
        help='Destination to sort the pictures into. Created if missing, must be empty. '
             'Default: SOURCE-sorted'
    )
    sort_parser.add_argument(
        '-n', '--no-open',
        action='store_true',
        help='Do not open the pile folders after sorting'
    )
    _add_open_options(sort_parser, config.opener)
    sort_parser.add_argument(
        '-t', '--threshold',
        type=int,
        default=config.hash_threshold,
        help=f'Hash distance below which images match. Default: {config.hash_threshold}'
    )
    sort_parser.add_argument(
        '-m', '--minutes',
        type=float,
        default=config.time_window_minutes,
        help=f'Capture time window in minutes. Default: {config.time_window_minutes}'
    )
    sort_parser.add_argument(
        '-w', '--workers',
        type=int,
        default=config.workers,
        help=f'Number of parallel workers. Default: {config.workers}'
    )
    _add_hash_options(sort_parser, config)
    sort_parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    # open
    open_parser = subparsers.add_parser(
        'open',
        help='Open the pile folders without rerunning the sorting process'
    )
    open_parser.add_argument('path', type=Path, help='Folder holding the pile directories')
    _add_open_options(open_parser, config.opener)

    # collect
    collect_parser = subparsers.add_parser(
        'collect',
        help='Collect all remaining images back into one folder after manual sorting'
    )
    collect_parser.add_argument('source', type=Path, help='Folder with the sorted piles')
    collect_parser.add_argument(
        '-d', '--destination',
        type=Path,
        help='Destination to collect the pictures into. Created if missing, must be empty. '
             'Default: SOURCE-final'
    )
    collect_parser.add_argument(
        '--no-delete',
        action='store_true',
        help='Do not delete the pile folders after collection'
    )
    collect_parser.add_argument(
        '-k', '--keep-names',
        action='store_true',
        help='Do not rename the images to their capture time'
    )

    # compare
    compare_parser = subparsers.add_parser(
        'compare',
        help='Print the hash of every image in a folder and their pairwise distances'
    )
    compare_parser.add_argument('directory', type=Path, help='Folder with images to compare')
    _add_hash_options(compare_parser, config)

    # config
    config_parser = subparsers.add_parser(
        'config',
        help='Show the effective configuration'
    )
    config_parser.add_argument(
        '-i', '--init',
        action='store_true',
        help='Create an example configuration file'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['sort', '/path/to/photos', '--threshold', '5'])
        >>> args.command, args.threshold
        ('sort', 5)
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
