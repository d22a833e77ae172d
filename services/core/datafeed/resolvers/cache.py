"""Cache for serialized secondary-provider history, cleared wholesale on a timer."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol


logger = logging.getLogger(__name__)


class HistoryCache(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def put(self, key: str, payload: str) -> None:
        ...

    def clear(self) -> None:
        ...

    def __len__(self) -> int:
        ...


class InMemoryHistoryCache:
    """Unbounded dict; entries are never evicted individually."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def put(self, key: str, payload: str) -> None:
        self._entries[key] = payload

    def clear(self) -> None:
        self._entries = {}

    def __len__(self) -> int:
        return len(self._entries)


def history_cache_key(symbol: str, start_date: str, end_date: str) -> str:
    return f"{symbol}|{start_date}|{end_date}"


class CacheSweeper:
    """Background task that empties a HistoryCache every ``interval_seconds``."""

    def __init__(self, cache: HistoryCache, interval_seconds: float):
        self.cache = cache
        self.interval_seconds = interval_seconds
        self.task: asyncio.Task | None = None

    async def start(self) -> None:
        logger.info(f"Starting history cache sweeper (interval: {self.interval_seconds}s)")
        self.task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self.task is None:
            return
        self.task.cancel()
        await asyncio.gather(self.task, return_exceptions=True)
        self.task = None
        logger.info("History cache sweeper stopped.")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            size = len(self.cache)
            self.cache.clear()
            logger.info(f"Cleared {size} history cache entries.")
