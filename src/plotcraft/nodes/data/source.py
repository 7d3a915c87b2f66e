"""
Data Source - Cached live data for graph nodes.

Graph evaluation is synchronous, but live data arrives over HTTP. A
DataSource bridges the two: ``get`` always returns immediately with the
best value it has (fresh cache, stale cache or defaults) and, when the
cache is missing or stale, starts at most one background fetch per
(node, arguments, refresh key). When a fetch lands the host is told via
``on_update`` so it can bump the graph generation and re-evaluate.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

CACHE_TTL = 5 * 60  # seconds

Fetcher = Callable[..., Awaitable[dict[str, Any]]]


def spawn_thread(target: Callable[[], None]) -> None:
    """Run a callable on a daemon thread."""
    threading.Thread(target=target, daemon=True).start()


@dataclass
class CacheEntry:
    """Cached data with the arguments and refresh key it was fetched for."""
    data: dict[str, Any]
    args: tuple
    refresh_key: Any
    fetched_at: float


class DataSource:
    """
    A per-node cache in front of one async fetcher.

    Attributes:
        name: Label used in log messages
        fetcher: Coroutine function taking ``*args`` and returning a dict
        defaults: Values returned before any data is available
        ttl: Seconds a cache entry stays fresh
        on_update: Called (without arguments) after a successful fetch
    """

    def __init__(
        self,
        name: str,
        fetcher: Fetcher,
        defaults: dict[str, Any],
        ttl: float = CACHE_TTL,
        on_update: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        spawn: Callable[[Callable[[], None]], None] = spawn_thread,
    ):
        self.name = name
        self.fetcher = fetcher
        self.defaults = defaults
        self.ttl = ttl
        self.on_update = on_update
        self._clock = clock
        self._spawn = spawn
        self._cache: dict[str, CacheEntry] = {}
        self._pending: set[tuple] = set()
        self._lock = threading.Lock()

    def _is_fresh(self, entry: CacheEntry, args: tuple, refresh_key: Any) -> bool:
        return (
            entry.args == args
            and entry.refresh_key == refresh_key
            and self._clock() - entry.fetched_at <= self.ttl
        )

    def get(self, node_id: str, args: tuple, refresh_key: Any = 0) -> dict[str, Any]:
        """
        Best available data for a node, starting a fetch if needed.

        Returns:
            Fresh cached data, else the last known data, else defaults
        """
        fetch_id = (node_id, args, refresh_key)
        with self._lock:
            entry = self._cache.get(node_id)
            if entry is not None and self._is_fresh(entry, args, refresh_key):
                return entry.data
            start = fetch_id not in self._pending
            if start:
                self._pending.add(fetch_id)
            data = entry.data if entry is not None else dict(self.defaults)

        if start:
            logger.debug(f"Fetching {self.name} data for node {node_id}: {args}")
            self._spawn(lambda: self._run_fetch(node_id, args, refresh_key))
        return data

    def is_loading(self, node_id: str) -> bool:
        with self._lock:
            return any(pending[0] == node_id for pending in self._pending)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _run_fetch(self, node_id: str, args: tuple, refresh_key: Any) -> None:
        fetch_id = (node_id, args, refresh_key)
        try:
            data = asyncio.run(self.fetcher(*args))
        except Exception as e:
            logger.warning(f"{self.name} data fetch failed: {e}")
            with self._lock:
                # Keep the last good data but restart the TTL so retries wait
                previous = self._cache.get(node_id)
                data = previous.data if previous is not None else dict(self.defaults)
                self._cache[node_id] = CacheEntry(data, args, refresh_key, self._clock())
                self._pending.discard(fetch_id)
            return

        with self._lock:
            self._cache[node_id] = CacheEntry(data, args, refresh_key, self._clock())
            self._pending.discard(fetch_id)
        logger.info(f"Fetched {self.name} data for node {node_id}")
        if self.on_update is not None:
            self.on_update()
