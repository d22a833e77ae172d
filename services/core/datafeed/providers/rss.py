"""Plain RSS feeds proxied verbatim."""

from __future__ import annotations

from .base import Fetcher


class FuturesNewsClient:
    def __init__(self, fetcher: Fetcher, host: str = "www.futuresmag.com"):
        self.fetcher = fetcher
        self.host = host

    async def fetch_feed(self) -> str:
        return await self.fetcher.fetch(self.host, "/rss/all", scheme="http")
