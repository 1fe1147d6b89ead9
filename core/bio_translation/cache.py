"""
Translation result cache.

Bounded in-memory map of (source, target, text) -> translated text. An
unknown source language shares the auto-detect slot. Lookups are
idempotent, so when the cache is full it is simply cleared and refilled.

Usage:
    cache = TranslationCache(max_entries=300)
    cache.set("Hello", "pt", "Olá")
    cache.get("Hello", "pt")   # "Olá"
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


def cache_key(text: str, target: str, source: Optional[str] = None) -> str:
    if source:
        return f"{source}>{target}|{text}"
    return f"{target}|{text}"


class TranslationCache:
    """Best-effort, size-bounded translation cache (single process)."""

    def __init__(self, max_entries: int = 300):
        self.max_entries = max(1, max_entries)
        self._store: dict[str, str] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, text: str, target: str, source: Optional[str] = None) -> Optional[str]:
        with self._lock:
            value = self._store.get(cache_key(text, target, source))
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
            return value

    def set(self, text: str, target: str, translated: str, source: Optional[str] = None) -> None:
        if not translated:
            return
        key = cache_key(text, target, source)
        with self._lock:
            if key not in self._store and len(self._store) >= self.max_entries:
                logger.debug("Translation cache full (%d entries), clearing", len(self._store))
                self._store.clear()
            self._store[key] = translated

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def stats(self) -> dict:
        return {
            "entries": len(self._store),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
        }
