"""
Unit tests for the bounded handle cache and the preview service built on it.
"""

import pytest

from samepic.exceptions import InvalidImageError
from samepic.handle_cache import HandleCache, HandleKey
from samepic.preview import PreviewService, render_thumbnail
from conftest import write_png_header


class TestHandleCache:
    """Test HandleCache LRU behaviour."""

    def test_zero_capacity_rejected(self):
        with pytest.raises(ValueError):
            HandleCache(0)

    def test_push_returns_increasing_keys(self):
        cache = HandleCache(3)
        keys = [cache.push(i) for i in range(3)]
        assert [k.value for k in keys] == [0, 1, 2]
        assert len(set(keys)) == 3

    def test_keys_never_reused_after_eviction(self):
        cache = HandleCache(1)
        first = cache.push("a")
        second = cache.push("b")
        assert first != second
        assert first not in cache
        assert second in cache

    def test_eviction_bound(self):
        cache = HandleCache(3)
        for i in range(10):
            cache.push(i)
            assert len(cache) <= 3
        assert len(cache) == 3

    def test_evicts_least_recently_used(self):
        cache = HandleCache(2)
        a = cache.push("a")
        b = cache.push("b")

        # Touch a so b becomes the LRU entry
        assert cache.get_or_insert(a, lambda: "unused") == "a"
        c = cache.push("c")

        assert a in cache
        assert b not in cache
        assert c in cache
        assert list(cache.keys()) == [a, c]

    def test_get_or_insert_hit_does_not_call_factory(self):
        cache = HandleCache(2)
        key = cache.push("cached")

        def factory():
            raise AssertionError("factory must not run on a hit")

        assert cache.get_or_insert(key, factory) == "cached"

    def test_get_or_insert_miss_reinserts(self):
        cache = HandleCache(1)
        old = cache.push("old")
        cache.push("new")  # evicts old

        assert cache.get_or_insert(old, lambda: "rebuilt") == "rebuilt"
        assert old in cache
        assert len(cache) == 1

    def test_get(self):
        cache = HandleCache(2)
        key = cache.push("value")
        assert cache.get(key) == "value"
        cache.clear()
        assert cache.get(key) is None

    def test_foreign_key_rejected(self):
        cache = HandleCache(2)
        other = HandleCache(2)
        foreign = other.push("x")
        with pytest.raises(ValueError):
            cache.get_or_insert(foreign, lambda: "y")

    def test_key_equality_by_identity(self):
        assert HandleKey(1, 5) == HandleKey(1, 5)
        assert hash(HandleKey(1, 5)) == hash(HandleKey(1, 5))
        assert HandleKey(1, 5) != HandleKey(2, 5)


class TestPreviewService:
    """Test PreviewService caching."""

    def test_render_thumbnail_bounded(self, sample_images):
        thumb = render_thumbnail(sample_images['ascending1'], max_side=64)
        assert max(thumb.size) <= 64

    def test_render_invalid(self, sample_images):
        with pytest.raises(InvalidImageError):
            render_thumbnail(sample_images['corrupted'])

    def test_second_request_served_from_cache(self, sample_images):
        service = PreviewService(capacity=2, max_side=32)
        first = service.get_preview(sample_images['ascending1'])
        second = service.get_preview(sample_images['ascending1'])
        assert first is second
        assert service.renders == 1

    def test_evicted_preview_rendered_again(self, sample_images):
        service = PreviewService(capacity=1, max_side=32)
        service.get_preview(sample_images['ascending1'])
        service.get_preview(sample_images['descending'])

        assert not service.is_cached(sample_images['ascending1'])
        service.get_preview(sample_images['ascending1'])

        assert service.renders == 3
        assert service.is_cached(sample_images['ascending1'])
        assert len(service) == 1

    def test_capacity_defaults_to_user_config(self, monkeypatch):
        monkeypatch.setenv('SAMEPIC_CACHE_CAPACITY', '3')
        assert PreviewService().capacity == 3

    def test_explicit_capacity_wins(self, monkeypatch):
        monkeypatch.setenv('SAMEPIC_CACHE_CAPACITY', '3')
        assert PreviewService(capacity=5).capacity == 5

    def test_oversized_image_invalid(self, temp_dir):
        path = temp_dir / "pano.png"
        write_png_header(path, 40000, 30000)
        with pytest.raises(InvalidImageError, match="too large"):
            render_thumbnail(path)
