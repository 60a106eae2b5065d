"""
CLI workflow orchestration for samepic.

Provides the SortOrchestrator class that coordinates the `sort` workflow
from validation through clustering, materialization and review.
"""

from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime, timedelta

from ..clustering import ClusterConfig, form_piles
from ..config import SORTED_SUFFIX
from ..exceptions import ConfigurationError
from ..materializer import compute_stats, create_piles, log_stats, write_report
from ..scanner import find_files, load_images_parallel
from ..utils.platform import check_hardlink_support
from ..utils.validators import (
    prepare_destination,
    validate_opener,
    validate_scan_params,
    validate_source_directory,
)
from .opener import OpenOptions, open_piles
from .reporting import print_sort_summary


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger('samepic')


class SortOrchestrator:
    """
    Orchestrates the `sort` workflow.

    Every configuration problem is raised as ConfigurationError before any
    image is loaded; per-file load failures are collected and reported at
    the end without affecting the exit code.
    """

    def __init__(self, args: argparse.Namespace, logger: logging.Logger | None = None):
        """Initialize the orchestrator."""
        self.args = args
        self.logger = logger or logging.getLogger(__name__)
        self.source = None
        self.destination = None
        self.opener = None
        self.cluster_config = None
        self.files = []
        self.images = []
        self.failures = []
        self.piles = []
        self.stats = None
        self.started_at = None
        self.duration = None
        self._start = 0.0

    def run(self) -> int:
        """
        Execute the complete sort workflow.

        Returns:
            Exit code (0 for success)

        Raises:
            ConfigurationError: Invalid source, destination, opener or parameters
            LinkError: Pile directories could not be materialized

        Workflow phases:
        1. Validation
        2. File scanning
        3. Image loading
        4. Clustering
        5. Materialization & reporting
        6. Review (unless --no-open)
        """
        self.started_at = datetime.now()
        self._start = time.monotonic()

        self._validate_phase()
        self._scan_phase()
        self._load_phase()
        self._cluster_phase()
        self._materialize_phase()

        if not self.args.no_open:
            self._open_phase()

        return 0

    def _validate_phase(self) -> None:
        """Phase 1: Validate arguments and prepare the destination."""
        args = self.args
        self.source = validate_source_directory(args.source)
        validate_scan_params(
            threshold=args.threshold,
            minutes=args.minutes,
            hash_size=args.hash_size,
            algorithm=args.algorithm,
            workers=args.workers,
        )
        self.cluster_config = ClusterConfig.from_minutes(args.threshold, args.minutes)

        if not args.no_open:
            self.opener = validate_opener(args.opener)

        self.destination = prepare_destination(args.destination, self.source, SORTED_SUFFIX)

        supported, reason = check_hardlink_support(self.source, self.destination)
        if not supported:
            raise ConfigurationError(f"Cannot hard link into {self.destination}: {reason}")

    def _scan_phase(self) -> None:
        """Phase 2: Enumerate files."""
        self.logger.info(f"Scanning {self.source} for images...")
        self.files = find_files(self.source)
        self.logger.info(f"Found {len(self.files):,} files")

    def _load_phase(self) -> None:
        """Phase 3: Fingerprint files in parallel."""
        self.images, self.failures = load_images_parallel(
            self.files,
            max_workers=self.args.workers,
            hash_size=self.args.hash_size,
            algorithm=self.args.algorithm,
            show_progress=not self.args.no_progress,
        )

    def _cluster_phase(self) -> None:
        """Phase 4: Form piles."""
        self.piles = form_piles(
            self.images,
            self.cluster_config,
            show_progress=not self.args.no_progress,
        )

    def _materialize_phase(self) -> None:
        """Phase 5: Create pile directories, log and persist statistics."""
        create_piles(self.piles, self.destination)
        self.stats = compute_stats(self.piles)
        log_stats(self.stats)
        # Duration covers everything up to and including the hard links
        self.duration = timedelta(seconds=time.monotonic() - self._start)
        write_report(self.destination, self.stats, self.started_at, self.duration)
        print_sort_summary(self.stats, self.failures, self.destination)

    def _open_phase(self) -> None:
        """Phase 6: Walk through the piles with the opener."""
        options = OpenOptions(
            opener=self.opener,
            skip_to=self.args.skip_to,
            skip_singletons=self.args.skip_singletons,
        )
        open_piles(self.destination, options)


__all__ = ['SortOrchestrator', 'setup_logging']
