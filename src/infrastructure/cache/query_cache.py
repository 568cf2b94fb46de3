"""Process-wide cache of remote reads, keyed by tuples.

Entries remember whether the read succeeded or failed. Invalidating a key
prefix drops every entry underneath it so the next read goes back to the
source. Entries not refreshed within the gc window are evicted.
"""
from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Literal

logger = logging.getLogger(__name__)

QueryKey = tuple[Hashable, ...]


@dataclass(frozen=True)
class QueryState:
    status: Literal["success", "error"]
    data: Any = None
    error: Exception | None = None
    updated_at: float = 0.0

    @property
    def is_error(self) -> bool:
        return self.status == "error"


class QueryCache:
    def __init__(self, stale_time: float | None = None, gc_time: float | None = None) -> None:
        if stale_time is None:
            stale_time = float(os.getenv("QUERY_STALE_SECONDS", "30"))
        if gc_time is None:
            gc_time = float(os.getenv("QUERY_GC_SECONDS", "300"))
        self.stale_time = stale_time
        self.gc_time = max(gc_time, stale_time)
        self._entries: dict[QueryKey, QueryState] = {}
        self._lock = threading.Lock()
        self._next_sweep = time.monotonic() + self.gc_time

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: QueryKey) -> QueryState | None:
        with self._lock:
            return self._entries.get(key)

    def _is_fresh(self, state: QueryState) -> bool:
        return state.status == "success" and time.monotonic() - state.updated_at < self.stale_time

    def fetch(self, key: QueryKey, query_fn: Callable[[], Any]) -> QueryState:
        """Return the cached state for ``key`` or run ``query_fn`` and store the outcome.

        Errors raised by ``query_fn`` are captured in the returned state.
        """
        self._collect_garbage()
        cached = self.get(key)
        if cached is not None and self._is_fresh(cached):
            return cached
        try:
            state = QueryState(status="success", data=query_fn(), updated_at=time.monotonic())
        except Exception as exc:
            logger.warning("Query %r failed: %s", key, exc)
            state = QueryState(status="error", error=exc, updated_at=time.monotonic())
        with self._lock:
            self._entries[key] = state
        return state

    def _collect_garbage(self) -> None:
        now = time.monotonic()
        with self._lock:
            if now < self._next_sweep:
                return
            self._next_sweep = now + self.gc_time
            expired = [key for key, state in self._entries.items() if now - state.updated_at >= self.gc_time]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Evicted %d unused queries", len(expired))

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every entry whose key starts with ``prefix``; returns how many were dropped."""
        n = len(prefix)
        with self._lock:
            stale = [key for key in self._entries if key[:n] == prefix]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Invalidated %d queries under %r", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_QUERY_CACHE: QueryCache | None = None


def get_query_cache() -> QueryCache:
    global _QUERY_CACHE
    if _QUERY_CACHE is None:
        _QUERY_CACHE = QueryCache()
    return _QUERY_CACHE
