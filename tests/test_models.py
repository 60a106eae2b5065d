"""
Unit tests for data models (Image, Pile and PileStats).
"""

import pytest
from datetime import timedelta

from samepic.models import Pile, PileStats
from conftest import T0


class TestImage:
    """Test Image data class."""

    def test_hash_and_equality_by_path(self, make_image):
        img1 = make_image("/test/image.jpg", 0x0, T0)
        img2 = make_image("/test/image.jpg", 0xFF, T0 + timedelta(days=3))
        img3 = make_image("/test/other.jpg", 0x0, T0)

        assert img1 == img2
        assert img1 != img3
        assert hash(img1) == hash(img2)
        assert len({img1, img2, img3}) == 2

    def test_empty_path_rejected(self, make_image):
        with pytest.raises(ValueError):
            make_image("", 0x0, T0)

    def test_filename_property(self, make_image):
        assert make_image("/path/to/image.jpg").filename == "image.jpg"

    def test_hash_distance(self, make_image):
        a = make_image("/a.jpg", 0x0)
        b = make_image("/b.jpg", 0x7)
        assert a.hash_distance(b) == 3
        assert b.hash_distance(a) == 3
        assert a.hash_distance(a) == 0

    def test_immutable(self, make_image):
        img = make_image("/a.jpg")
        with pytest.raises(AttributeError):
            img.path = "/b.jpg"


class TestPile:
    """Test Pile cluster."""

    def test_empty_pile_rejected(self):
        with pytest.raises(ValueError):
            Pile([])

    def test_singleton_pile(self, make_image):
        img = make_image("/a.jpg", timestamp=T0)
        pile = Pile([img])
        assert len(pile) == 1
        assert img in pile
        assert pile.date == T0.date()
        assert pile.time_spread == timedelta(0)

    def test_date_follows_membership(self, make_image):
        pile = Pile([make_image("/a.jpg", timestamp=T0)])
        earlier = make_image("/b.jpg", timestamp=T0 - timedelta(days=1))

        pile.add(earlier)

        assert pile.earliest == earlier.timestamp
        assert pile.date == earlier.timestamp.date()

    def test_date_cannot_be_set(self, make_image):
        pile = Pile([make_image("/a.jpg")])
        with pytest.raises(AttributeError):
            pile.date = T0.date()

    def test_merge_takes_minimum_date(self, make_image):
        left = Pile([make_image("/a.jpg", timestamp=T0)])
        right = Pile([make_image("/b.jpg", timestamp=T0 - timedelta(hours=30)),
                      make_image("/c.jpg", timestamp=T0 + timedelta(hours=1))])

        left.merge(right)

        assert len(left) == 3
        assert left.earliest == T0 - timedelta(hours=30)
        assert left.time_spread == timedelta(hours=31)

    def test_merge_consumes_donor(self, make_image):
        left = Pile([make_image("/a.jpg")])
        right = Pile([make_image("/b.jpg")])

        left.merge(right)

        assert right.consumed
        assert not left.consumed
        with pytest.raises(ValueError, match="merged"):
            right.earliest
        with pytest.raises(ValueError):
            len(right)
        with pytest.raises(ValueError):
            right.add(make_image("/c.jpg"))

    def test_consumed_pile_cannot_be_merged_again(self, make_image):
        left = Pile([make_image("/a.jpg")])
        right = Pile([make_image("/b.jpg")])
        left.merge(right)
        with pytest.raises(ValueError):
            Pile([make_image("/d.jpg")]).merge(right)
        assert len(left) == 2

    def test_merge_with_self_is_noop(self, make_image):
        pile = Pile([make_image("/a.jpg")])
        pile.merge(pile)
        assert len(pile) == 1

    def test_iteration_sorted_by_time(self, make_image):
        late = make_image("/late.jpg", timestamp=T0 + timedelta(minutes=5))
        early = make_image("/early.jpg", timestamp=T0)
        pile = Pile([late, early])
        assert [img.path for img in pile] == ["/early.jpg", "/late.jpg"]

    def test_duplicate_add_ignored(self, make_image):
        pile = Pile([make_image("/a.jpg")])
        pile.add(make_image("/a.jpg", 0xFF))
        assert len(pile) == 1


class TestPileStats:
    """Test PileStats data class."""

    def test_defaults(self):
        stats = PileStats()
        assert stats.image_count == 0
        assert stats.singleton_count == 0

    def test_to_dict(self):
        stats = PileStats(image_count=5, pile_count=2, average_size=2.5,
                          median_size=3, max_size=3, longest_spread_minutes=12,
                          size_histogram={2: 1, 3: 1})
        data = stats.to_dict()
        assert data['image_count'] == 5
        assert data['average_size'] == 2.5
        assert data['singleton_count'] == 0
