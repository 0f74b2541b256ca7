"""Tests for the LRU/TTL profile cache."""

import sys
import threading
import unittest
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from humanizer.style.cache import ProfileCache, cache_key, configure_default_cache, default_cache
from humanizer.style.profile import StylometricProfile


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestProfileCache(unittest.TestCase):
    """Test cases for ProfileCache."""

    def setUp(self):
        self.clock = FakeClock()
        self.cache = ProfileCache(max_size=3, ttl_seconds=10, clock=self.clock)

    def test_get_returns_same_instance(self):
        profile = StylometricProfile(word_count=3)
        self.cache.set("some text", profile)
        self.assertIs(self.cache.get("some text"), profile)

    def test_miss_returns_none(self):
        self.assertIsNone(self.cache.get("never stored"))
        self.assertEqual(self.cache.stats()["misses"], 1)

    def test_size_never_exceeds_max(self):
        for i in range(10):
            self.cache.set(f"text {i}", StylometricProfile(word_count=i))
            self.assertLessEqual(self.cache.size(), 3)
        self.assertEqual(len(self.cache), 3)
        self.assertEqual(self.cache.stats()["evictions"], 7)

    def test_least_recently_used_is_evicted(self):
        cache = ProfileCache(max_size=2, clock=self.clock)
        cache.set("a", StylometricProfile(word_count=1))
        cache.set("b", StylometricProfile(word_count=2))
        cache.get("a")
        cache.set("c", StylometricProfile(word_count=3))

        self.assertIsNotNone(cache.get("a"))
        self.assertIsNone(cache.get("b"))
        self.assertIsNotNone(cache.get("c"))

    def test_expired_entry_is_removed(self):
        self.cache.set("text", StylometricProfile(word_count=1))
        self.clock.now = 10
        self.assertIsNotNone(self.cache.get("text"))
        self.clock.now = 10.5
        self.assertIsNone(self.cache.get("text"))
        self.assertEqual(self.cache.size(), 0)

    def test_access_does_not_extend_ttl(self):
        self.cache.set("text", StylometricProfile(word_count=1))
        self.clock.now = 8
        self.cache.get("text")
        self.clock.now = 12
        self.assertIsNone(self.cache.get("text"))

    def test_reinsert_replaces_entry(self):
        self.cache.set("text", StylometricProfile(word_count=1))
        replacement = StylometricProfile(word_count=2)
        self.cache.set("text", replacement)
        self.assertIs(self.cache.get("text"), replacement)
        self.assertEqual(self.cache.size(), 1)

    def test_clear(self):
        self.cache.set("text", StylometricProfile())
        self.cache.clear()
        self.assertEqual(self.cache.size(), 0)

    def test_resize_evicts_oldest(self):
        for name in ("a", "b", "c"):
            self.cache.set(name, StylometricProfile())
        self.cache.resize(1)
        self.assertEqual(self.cache.size(), 1)
        self.assertIsNotNone(self.cache.get("c"))

    def test_invalid_size_rejected(self):
        with self.assertRaises(ValueError):
            ProfileCache(max_size=0)

    def test_concurrent_writers_stay_bounded(self):
        cache = ProfileCache(max_size=20)
        errors = []

        def worker(offset):
            try:
                for i in range(200):
                    cache.set(f"text {offset}-{i}", StylometricProfile(word_count=i))
                    cache.get(f"text {offset}-{i // 2}")
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertLessEqual(cache.size(), 20)


def test_cache_key_ignores_surrounding_whitespace():
    assert cache_key("hello world") == cache_key("  hello world\n")
    assert cache_key("hello world") != cache_key("hello  world")


def test_cache_key_normalizes_unicode():
    composed = "caf\u00e9"
    decomposed = "cafe\u0301"
    assert cache_key(composed) == cache_key(decomposed)


def test_configure_default_cache_resizes_in_place():
    original = (default_cache.max_size, default_cache.ttl_seconds)
    try:
        cache = configure_default_cache({"cache": {"max_size": 7, "ttl_seconds": 30}})
        assert cache is default_cache
        assert default_cache.max_size == 7
        assert default_cache.ttl_seconds == 30
    finally:
        default_cache.resize(*original)


if __name__ == '__main__':
    unittest.main()
