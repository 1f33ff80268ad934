import threading
import unittest

from careerpilot.ai.cache import DEFAULT_CAPACITY, ResultCache, cache_key
from careerpilot.ai.types import GenerationRequest


class ResultCacheTests(unittest.TestCase):
    def test_put_then_get_returns_same_value(self):
        cache = ResultCache()
        value = {"questions": [{"question": "Q1", "answer": "A1"}]}
        cache.put("k", value)
        self.assertIs(cache.get("k"), value)
        self.assertIn("k", cache)
        self.assertIsNone(cache.get("missing"))

    def test_default_capacity(self):
        self.assertEqual(ResultCache().capacity, DEFAULT_CAPACITY)
        self.assertEqual(DEFAULT_CAPACITY, 100)

    def test_oldest_key_is_evicted_after_capacity_plus_one_inserts(self):
        cache = ResultCache(capacity=100)
        for idx in range(101):
            cache.put(f"key-{idx}", idx)
        self.assertEqual(len(cache), 100)
        self.assertIsNone(cache.get("key-0"))
        self.assertEqual(cache.get("key-1"), 1)
        self.assertEqual(cache.get("key-100"), 100)

    def test_eviction_is_fifo_not_lru(self):
        cache = ResultCache(capacity=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("a", 10)
        cache.put("c", 3)
        self.assertNotIn("a", cache)
        self.assertEqual(cache.get("b"), 2)
        self.assertEqual(cache.get("c"), 3)

    def test_entry_records_creation_time(self):
        cache = ResultCache()
        cache.put("k", "v")
        entry = cache.entry("k")
        self.assertEqual(entry.key, "k")
        self.assertEqual(entry.value, "v")
        self.assertIsNotNone(entry.created_at.tzinfo)

    def test_invalid_capacity(self):
        with self.assertRaises(ValueError):
            ResultCache(capacity=0)

    def test_concurrent_puts_respect_capacity(self):
        cache = ResultCache(capacity=50)

        def writer(offset: int) -> None:
            for idx in range(200):
                cache.put(f"{offset}-{idx}", idx)

        threads = [threading.Thread(target=writer, args=(offset,)) for offset in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(cache), 50)


class CacheKeyTests(unittest.TestCase):
    def test_context_order_does_not_matter(self):
        first = GenerationRequest("Engineer", "career", auxiliary_context={"a": "1", "b": "2"})
        second = GenerationRequest("Engineer", "career", auxiliary_context={"b": "2", "a": "1"})
        self.assertEqual(cache_key(first), cache_key(second))

    def test_identifying_fields_change_the_key(self):
        base = GenerationRequest("Engineer", "technical", company="Acme")
        variants = [
            GenerationRequest("Engineer", "behavioral", company="Acme"),
            GenerationRequest("Designer", "technical", company="Acme"),
            GenerationRequest("Engineer", "technical", company="Other"),
            GenerationRequest("Engineer", "technical", company="Acme", auxiliary_context={"display_mode": "flashcard"}),
        ]
        for variant in variants:
            with self.subTest(variant=variant):
                self.assertNotEqual(cache_key(base), cache_key(variant))

    def test_surrounding_whitespace_is_ignored(self):
        self.assertEqual(
            cache_key(GenerationRequest(" Engineer ", "technical", company=" Acme")),
            cache_key(GenerationRequest("Engineer", "technical", company="Acme")),
        )
        self.assertEqual(
            cache_key(GenerationRequest("Engineer", "technical", company=None)),
            cache_key(GenerationRequest("Engineer", "technical", company="")),
        )


if __name__ == "__main__":
    unittest.main()
