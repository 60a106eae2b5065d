"""
Configuration constants for samepic.

This module contains the built-in defaults including:
- Match predicate thresholds (hash distance and time window)
- Perceptual hash settings
- EXIF tag ids consulted for capture time
- Output naming for pile directories and the run report
"""

import os

# Maximum Hamming distance (exclusive) for two images to be related
# Lower = stricter matching (0-64 range for 64-bit hashes)
DEFAULT_HASH_THRESHOLD = 10

# Maximum capture time difference (exclusive) for two images to be related
DEFAULT_TIME_WINDOW_MINUTES = 30

# Perceptual hash settings
# hash_size=8 produces a 64-bit fingerprint
DEFAULT_HASH_SIZE = 8
DEFAULT_HASH_ALGORITHM = 'dhash'
HASH_ALGORITHMS = ('dhash', 'phash', 'ahash', 'whash')

# Default number of parallel workers for image loading
DEFAULT_WORKERS = 4

# Capacity of the preview handle cache
DEFAULT_CACHE_CAPACITY = 64
DEFAULT_PREVIEW_SIDE = 512

# EXIF tags holding a capture time, in priority order
EXIF_DATETIME_ORIGINAL = 0x9003   # 36867
EXIF_DATETIME = 0x0132            # 306
EXIF_DATETIME_DIGITIZED = 0x9004  # 36868
EXIF_TIMESTAMP_TAGS = (
    EXIF_DATETIME_ORIGINAL,
    EXIF_DATETIME,
    EXIF_DATETIME_DIGITIZED,
)

# "YYYY:MM:DD HH:MM:SS"
EXIF_DATETIME_FORMAT = '%Y:%m:%d %H:%M:%S'

# File name stem used by `collect` when renaming by timestamp
FILENAME_DATETIME_FORMAT = '%Y-%m-%dT%H-%M-%S'

# Pile directory date part, e.g. 2023-07-14_0001
PILE_DATE_FORMAT = '%Y-%m-%d'

# Statistics report written into the destination root
REPORT_FILENAME = 'samepic-report.txt'

# Default destination suffixes, e.g. photos -> photos-sorted
SORTED_SUFFIX = 'sorted'
COLLECTED_SUFFIX = 'final'

# User configuration location
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.samepic')
