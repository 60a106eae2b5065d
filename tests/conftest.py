"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
import struct
import time
import os
import zlib
from datetime import datetime
from pathlib import Path

import imagehash
from PIL import Image as PILImage

from samepic.models import Image
from samepic.user_config import get_user_config


T0 = datetime(2023, 7, 14, 9, 30, 0)


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.samepic configuration."""
    for var in ('SAMEPIC_HASH_THRESHOLD', 'SAMEPIC_TIME_WINDOW', 'SAMEPIC_WORKERS',
                'SAMEPIC_HASH_SIZE', 'SAMEPIC_HASH_ALGORITHM', 'SAMEPIC_CACHE_CAPACITY',
                'SAMEPIC_OPENER'):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv('SAMEPIC_CONFIG_DIR', str(tmp_path / 'samepic-config'))
    get_user_config().reload()
    yield
    get_user_config().reload()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def make_image():
    """
    Factory for fingerprinted Image records without touching the disk.

    Usage: make_image('a.jpg', 0x7, T0)
    """
    def _make(path, hash_value=0, timestamp=T0):
        hex_hash = f"{hash_value:016x}"
        return Image(path=str(path), timestamp=timestamp,
                     perceptual_hash=imagehash.hex_to_hash(hex_hash))
    return _make


def gradient(ascending=True, size=256):
    """Horizontal gradient: dark-to-light (ascending) or light-to-dark."""
    img = PILImage.linear_gradient('L').resize((size, size))
    return img.rotate(90 if ascending else -90).convert('RGB')


def save_with_exif_datetime(img, path, value):
    """Save a JPEG carrying an EXIF DateTime (IFD0) tag."""
    exif = PILImage.Exif()
    exif[0x0132] = value
    img.save(path, 'JPEG', exif=exif)


def save_with_exif_original(img, path, original, datetime_value=None):
    """Save a JPEG with DateTimeOriginal in the Exif sub-IFD (and optionally IFD0 DateTime)."""
    exif = PILImage.Exif()
    if datetime_value is not None:
        exif[0x0132] = datetime_value
    exif[0x8769] = {0x9003: original}
    img.save(path, 'JPEG', exif=exif)


def write_png_header(path, width, height):
    """
    Write a minimal PNG declaring width x height pixels.

    Only the header matters: Pillow checks the pixel count when opening,
    before any pixel data is decoded.
    """
    def chunk(kind, data):
        body = kind + data
        return struct.pack('>I', len(data)) + body + struct.pack('>I', zlib.crc32(body) & 0xffffffff)

    ihdr = struct.pack('>IIBBBBB', width, height, 8, 2, 0, 0, 0)
    with open(path, 'wb') as f:
        f.write(b'\x89PNG\r\n\x1a\n')
        f.write(chunk(b'IHDR', ihdr))
        f.write(chunk(b'IDAT', zlib.compress(b'\x00')))
        f.write(chunk(b'IEND', b''))


def freeze_atime(path):
    """
    Pin the access time in the future so reading the file does not
    move it (relatime only updates atimes older than mtime/ctime).
    """
    future = time.time() + 2 * 24 * 3600
    os.utime(path, (future, os.stat(path).st_mtime))


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample files for testing.

    Returns:
        dict with paths to:
        - ascending1.png, ascending2.png (same content, near-identical shots)
        - descending.png (visually opposite image)
        - exif.jpg (EXIF DateTime 2021:05:06 07:08:09)
        - corrupted.txt (not an image)
    """
    images = {}

    src = temp_dir / "src"
    src.mkdir()

    asc = gradient(ascending=True)
    asc.save(src / "ascending1.png", 'PNG')
    asc.save(src / "ascending2.png", 'PNG', optimize=True)
    images['ascending1'] = str(src / "ascending1.png")
    images['ascending2'] = str(src / "ascending2.png")

    gradient(ascending=False).save(src / "descending.png", 'PNG')
    images['descending'] = str(src / "descending.png")

    save_with_exif_datetime(asc, src / "exif.jpg", "2021:05:06 07:08:09")
    images['exif'] = str(src / "exif.jpg")

    (src / "corrupted.txt").write_text("not an image")
    images['corrupted'] = str(src / "corrupted.txt")

    images['root'] = str(src)
    return images
