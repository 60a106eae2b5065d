"""
CLI package for samepic.

Provides the command-line interface for sorting photos into piles,
reviewing them, and collecting the curated result.

Public API:
- main: Entry point for CLI execution
- SortOrchestrator: `sort` workflow orchestration class
- open_piles: Walk pile directories with an opener
- collect: Flatten curated piles back into one folder
"""

from __future__ import annotations

import argparse
import logging

from ..config import COLLECTED_SUFFIX
from ..exceptions import SamepicError
from ..scanner import find_files, load_images_parallel
from ..user_config import get_user_config
from ..utils.validators import (
    prepare_destination,
    validate_opener,
    validate_hash_params,
    validate_source_directory,
)
from .arg_parser import create_parser, parse_arguments
from .collect import collect, generate_file_name, remove_sorted_tree
from .opener import OpenOptions, open_piles
from .orchestrator import SortOrchestrator, setup_logging
from .reporting import print_hash_table, print_sort_summary


def run_sort(args: argparse.Namespace, logger: logging.Logger) -> int:
    return SortOrchestrator(args, logger).run()


def run_open(args: argparse.Namespace, logger: logging.Logger) -> int:
    path = validate_source_directory(args.path)
    options = OpenOptions(
        opener=validate_opener(args.opener),
        skip_to=args.skip_to,
        skip_singletons=args.skip_singletons,
    )
    open_piles(path, options)
    return 0


def run_collect(args: argparse.Namespace, logger: logging.Logger) -> int:
    source = validate_source_directory(args.source)
    destination = prepare_destination(args.destination, source, COLLECTED_SUFFIX)
    collect(source, destination, keep_names=args.keep_names)
    if not args.no_delete:
        remove_sorted_tree(source)
    return 0


def run_compare(args: argparse.Namespace, logger: logging.Logger) -> int:
    directory = validate_source_directory(args.directory)
    validate_hash_params(args.hash_size, args.algorithm)
    images, _ = load_images_parallel(
        find_files(directory),
        hash_size=args.hash_size,
        algorithm=args.algorithm,
        show_progress=False,
    )
    print_hash_table(images)
    return 0


def run_config(args: argparse.Namespace, logger: logging.Logger) -> int:
    config = get_user_config()

    if args.init:
        if config.create_example_config():
            print("✓ Created example configuration file at:")
            print(f"  {config.config_file_path}")
            return 0
        print("✗ Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: ✓ Found")
    else:
        print("Status: ✗ Not found (using defaults)")
        print("\nRun 'samepic config --init' to create one.")

    print("\nCurrent settings:")
    for key, value in config.as_dict().items():
        print(f"  {key}: {value}")
    return 0


COMMANDS = {
    'sort': run_sort,
    'open': run_open,
    'collect': run_collect,
    'compare': run_compare,
    'config': run_config,
}


def main(argv=None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Argument list (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)
    logger = setup_logging(args.verbose)

    try:
        return COMMANDS[args.command](args, logger)
    except SamepicError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Filesystem error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Aborted.")
        return 1


__all__ = [
    # Main entry point
    'main',
    # Core classes
    'SortOrchestrator',
    'OpenOptions',
    # Utilities
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'open_piles',
    'collect',
    'generate_file_name',
    'print_sort_summary',
    'print_hash_table',
]
