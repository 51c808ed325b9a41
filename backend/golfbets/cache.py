from __future__ import annotations

from asyncio import Lock
from collections.abc import Iterable
import time
from typing import Any

from .config import LIVE_RESULTS_CACHE_TTL


class TTLCache:
    """A simple in-memory TTL cache with async-safe access.

    Keys are tuples whose first item is a round id, so every entry for a
    round can be dropped at once when it is deleted or ended.
    """

    def __init__(self, ttl_seconds: float = 300.0, max_entries: int = 512) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._lock = Lock()
        self._store: dict[Any, tuple[Any, float]] = {}

    async def get(self, key: Any) -> Any | None:
        now = time.monotonic()
        async with self._lock:
            entry = self._store.get(key)
            if not entry:
                return None
            value, expires_at = entry
            if expires_at <= now:
                self._store.pop(key, None)
                return None
            return value

    async def set(self, key: Any, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self._ttl if ttl_seconds is None else ttl_seconds
        now = time.monotonic()
        async with self._lock:
            if ttl <= 0:
                self._store.pop(key, None)
                return
            if key not in self._store and len(self._store) >= self._max_entries:
                self._evict(now)
            self._store[key] = (value, now + ttl)

    def _evict(self, now: float) -> None:
        # caller holds the lock
        expired = [k for k, (_, expires_at) in self._store.items() if expires_at <= now]
        for key in expired:
            self._store.pop(key, None)
        if len(self._store) >= self._max_entries:
            oldest = min(self._store, key=lambda k: self._store[k][1])
            self._store.pop(oldest, None)

    async def invalidate_rounds(self, round_ids: Iterable[str]) -> None:
        ids = {rid for rid in round_ids if rid}
        if not ids:
            return
        async with self._lock:
            keys_to_remove = [
                key
                for key in self._store
                if isinstance(key, tuple) and key and key[0] in ids
            ]
            for key in keys_to_remove:
                self._store.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


live_results_cache = TTLCache(ttl_seconds=LIVE_RESULTS_CACHE_TTL)
