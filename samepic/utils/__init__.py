"""
Utilities package for samepic.

Provides:
- formatters: Human-readable formatting for numbers and durations
- validators: Input validation raising ConfigurationError
- platform: Hard link capability checks and the OS default opener
"""

from __future__ import annotations

from . import formatters
from . import validators
from . import platform

from .formatters import format_number, format_duration
from .validators import (
    validate_source_directory,
    default_destination,
    prepare_destination,
    validate_opener,
    validate_threshold,
    validate_hash_params,
    validate_scan_params,
)
from .platform import check_hardlink_support, open_with_default_program, pause

__all__ = [
    # Submodules
    'formatters',
    'validators',
    'platform',
    # Formatters
    'format_number',
    'format_duration',
    # Validators
    'validate_source_directory',
    'default_destination',
    'prepare_destination',
    'validate_opener',
    'validate_threshold',
    'validate_hash_params',
    'validate_scan_params',
    # Platform
    'check_hardlink_support',
    'open_with_default_program',
    'pause',
]
