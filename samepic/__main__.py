"""
Allow running the package with: python -m samepic

Examples:
    python -m samepic sort /path/to/photos          # Sort into /path/to/photos-sorted
    python -m samepic open /path/to/photos-sorted   # Review piles again
    python -m samepic collect /path/to/photos-sorted
    python -m samepic config --init                 # Create example config file
"""

import sys

from .cli import main


if __name__ == '__main__':
    sys.exit(main())
