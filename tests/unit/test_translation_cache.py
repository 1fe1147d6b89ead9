"""Tests for the bounded translation result cache."""

from core.bio_translation.cache import TranslationCache, cache_key


class TestTranslationCache:

    def test_set_and_get(self):
        cache = TranslationCache()
        cache.set("Hello", "pt", "Olá")
        assert cache.get("Hello", "pt") == "Olá"

    def test_key_includes_target(self):
        cache = TranslationCache()
        cache.set("Hello", "pt", "Olá")
        assert cache.get("Hello", "es") is None
        assert cache_key("Hello", "pt") == "pt|Hello"

    def test_key_includes_source(self):
        cache = TranslationCache()
        cache.set("Ciao", "en", "Hi", source="it")
        assert cache.get("Ciao", "en", source="pt") is None
        assert cache.get("Ciao", "en") is None
        assert cache.get("Ciao", "en", source="it") == "Hi"
        assert cache_key("Hello", "pt", "en") == "en>pt|Hello"

    def test_empty_translation_not_stored(self):
        cache = TranslationCache()
        cache.set("Hello", "pt", "")
        assert len(cache) == 0

    def test_cleared_when_full(self):
        cache = TranslationCache(max_entries=2)
        cache.set("a", "pt", "1")
        cache.set("b", "pt", "2")
        cache.set("c", "pt", "3")

        assert len(cache) == 1
        assert cache.get("a", "pt") is None
        assert cache.get("c", "pt") == "3"

    def test_overwrite_existing_key_when_full(self):
        cache = TranslationCache(max_entries=2)
        cache.set("a", "pt", "1")
        cache.set("b", "pt", "2")
        cache.set("a", "pt", "1b")

        assert len(cache) == 2
        assert cache.get("a", "pt") == "1b"

    def test_stats(self):
        cache = TranslationCache(max_entries=10)
        cache.set("a", "pt", "1")
        cache.get("a", "pt")
        cache.get("b", "pt")

        assert cache.stats() == {"entries": 1, "max_entries": 10, "hits": 1, "misses": 1}

    def test_clear(self):
        cache = TranslationCache()
        cache.set("a", "pt", "1")
        cache.clear()
        assert len(cache) == 0
