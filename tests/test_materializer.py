"""
Unit tests for pile materialization and run statistics.
"""

import os
import pytest
from datetime import datetime, timedelta

from samepic.config import REPORT_FILENAME
from samepic.exceptions import LinkError
from samepic.materializer import (
    compute_stats,
    create_piles,
    pile_directory_names,
    write_report,
)
from samepic.models import Pile
from conftest import T0


@pytest.fixture
def source_files(temp_dir, make_image):
    """Real files on disk wrapped as Image records."""
    src = temp_dir / "src"
    src.mkdir()

    def _make(name, timestamp=T0, subdir=None):
        folder = src / subdir if subdir else src
        folder.mkdir(exist_ok=True)
        path = folder / name
        path.write_bytes(name.encode())
        return make_image(str(path), 0x0, timestamp)
    return _make


@pytest.fixture
def destination(temp_dir):
    dest = temp_dir / "dest"
    dest.mkdir()
    return dest


class TestPileDirectoryNames:
    """Test pile directory naming."""

    def test_same_date_gets_sequence(self, make_image):
        piles = [
            Pile([make_image("/a.jpg", timestamp=T0)]),
            Pile([make_image("/b.jpg", timestamp=T0 + timedelta(hours=3))]),
        ]
        assert pile_directory_names(piles) == ["2023-07-14_0000", "2023-07-14_0001"]

    def test_sequence_per_date(self, make_image):
        piles = [
            Pile([make_image("/a.jpg", timestamp=T0)]),
            Pile([make_image("/b.jpg", timestamp=T0 + timedelta(days=1))]),
            Pile([make_image("/c.jpg", timestamp=T0 + timedelta(hours=1))]),
        ]
        assert pile_directory_names(piles) == [
            "2023-07-14_0000", "2023-07-15_0000", "2023-07-14_0001",
        ]

    def test_uses_earliest_member(self, make_image):
        pile = Pile([make_image("/a.jpg", timestamp=T0),
                     make_image("/b.jpg", timestamp=T0 - timedelta(days=1))])
        assert pile_directory_names([pile]) == ["2023-07-13_0000"]


class TestCreatePiles:
    """Test create_piles function."""

    def test_creates_directories_and_links(self, source_files, destination):
        a = source_files("a.jpg")
        b = source_files("b.jpg", T0 + timedelta(minutes=1))
        c = source_files("c.jpg", T0 + timedelta(hours=5))

        created = create_piles([Pile([a, b]), Pile([c])], destination)

        assert [d.name for d in created] == ["2023-07-14_0000", "2023-07-14_0001"]
        assert sorted(os.listdir(created[0])) == ["a.jpg", "b.jpg"]
        assert os.listdir(created[1]) == ["c.jpg"]
        assert os.path.samefile(created[0] / "a.jpg", a.path)
        assert os.stat(a.path).st_nlink == 2

    def test_existing_link_target_fails(self, source_files, destination):
        first = source_files("same.jpg", subdir="one")
        second = source_files("same.jpg", subdir="two")

        with pytest.raises(LinkError) as exc_info:
            create_piles([Pile([first, second])], destination)

        assert exc_info.value.source in (first.path, second.path)

    def test_existing_directory_fails(self, source_files, destination):
        (destination / "2023-07-14_0000").mkdir()
        with pytest.raises(LinkError):
            create_piles([Pile([source_files("a.jpg")])], destination)

    def test_missing_source_fails(self, make_image, destination, temp_dir):
        ghost = make_image(str(temp_dir / "ghost.jpg"))
        with pytest.raises(LinkError) as exc_info:
            create_piles([Pile([ghost])], destination)
        assert exc_info.value.source == ghost.path

    def test_no_piles(self, destination):
        assert create_piles([], destination) == []


class TestComputeStats:
    """Test compute_stats function."""

    def test_empty(self):
        stats = compute_stats([])
        assert stats.image_count == 0
        assert stats.pile_count == 0

    def test_aggregates(self, make_image):
        piles = [
            Pile([make_image(f"/a{i}.jpg", timestamp=T0 + timedelta(minutes=i)) for i in range(4)]),
            Pile([make_image("/b0.jpg", timestamp=T0), make_image("/b1.jpg", timestamp=T0 + timedelta(minutes=45))]),
            Pile([make_image("/c0.jpg")]),
        ]

        stats = compute_stats(piles)

        assert stats.image_count == 7
        assert stats.pile_count == 3
        assert stats.average_size == pytest.approx(7 / 3)
        assert stats.median_size == 2
        assert stats.max_size == 4
        assert stats.longest_spread_minutes == 45
        assert stats.size_histogram == {1: 1, 2: 1, 4: 1}
        assert stats.singleton_count == 1


class TestWriteReport:
    """Test write_report function."""

    def test_report_contents(self, make_image, destination):
        piles = [Pile([make_image("/a.jpg"), make_image("/b.jpg", timestamp=T0 + timedelta(minutes=12))])]
        stats = compute_stats(piles)

        path = write_report(destination, stats, datetime(2024, 1, 2, 3, 4, 5), timedelta(seconds=75))

        assert path == destination / REPORT_FILENAME
        text = path.read_text(encoding='utf-8')
        assert "Run started: 2024-01-02 03:04:05" in text
        assert "Run duration: 1m 15s" in text
        assert "Image count: 2" in text
        assert "Pile count: 1" in text
        assert "Longest time delta: 12min" in text
        assert "2 images: 1 piles" in text
