"""
Exception types for samepic.

Three families are raised:
- LoadError: a single file could not be fingerprinted. Callers log it and
  continue with the remaining files.
- LinkError: a pile directory or hard link could not be created. Fatal.
- ConfigurationError: invalid input detected before any clustering work.
"""

from __future__ import annotations


class SamepicError(Exception):
    """Base class for all samepic errors."""


class LoadError(SamepicError):
    """An image could not be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image {path}: {reason}")


class ImageIOError(LoadError):
    """The file could not be read."""


class InvalidImageError(LoadError):
    """The file is not a decodable image."""


class LinkError(SamepicError):
    """A pile directory or hard link could not be created."""

    def __init__(self, source: str, target: str, reason: str):
        self.source = source
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to link {source} -> {target}: {reason}")


class ConfigurationError(SamepicError):
    """Invalid run configuration (paths, thresholds, opener)."""


__all__ = [
    'SamepicError',
    'LoadError',
    'ImageIOError',
    'InvalidImageError',
    'LinkError',
    'ConfigurationError',
]
