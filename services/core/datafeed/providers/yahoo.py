"""Yahoo Finance endpoints: CSV history, YQL quotes, chart metadata and RSS headlines."""

from __future__ import annotations

import logging
from typing import Any

from ..utils.dates import utc_date_parts
from .base import Fetcher


logger = logging.getLogger(__name__)

YQL_ENV = "store://datatables.org/alltableswithkeys"


class YahooClient:
    """Builds Yahoo requests and hands them to the fetcher."""

    def __init__(
        self,
        fetcher: Fetcher,
        history_host: str = "ichart.finance.yahoo.com",
        quote_host: str = "query.yahooapis.com",
        metadata_host: str = "query1.finance.yahoo.com",
        news_host: str = "feeds.finance.yahoo.com",
    ):
        self.fetcher = fetcher
        self.history_host = history_host
        self.quote_host = quote_host
        self.metadata_host = metadata_host
        self.news_host = news_host

    @staticmethod
    def history_params(
        symbol: str,
        start_ts: int,
        end_ts: int | None,
        resolution: str,
    ) -> dict[str, Any]:
        """
        Query for the table.csv endpoint.

        The provider takes dates as separate fields with a 0-indexed month:
        a/b/c for the start month/day/year and d/e/f for the end.
        """
        year, month, day = utc_date_parts(start_ts)
        params: dict[str, Any] = {"s": symbol, "a": month, "b": day, "c": year}

        if end_ts is not None:
            end_year, end_month, end_day = utc_date_parts(end_ts)
            params.update({"d": end_month, "e": end_day, "f": end_year})

        params["g"] = resolution
        params["ignore"] = ".csv"
        return params

    async def fetch_history(
        self,
        symbol: str,
        start_ts: int,
        end_ts: int | None,
        resolution: str,
    ) -> str:
        params = self.history_params(symbol, start_ts, end_ts, resolution)
        logger.info(f"Requesting {self.history_host}/table.csv {params}")
        return await self.fetcher.fetch(self.history_host, "/table.csv", params=params)

    @staticmethod
    def quotes_query(symbols: list[str]) -> str:
        quoted = "','".join(s.replace("'", "") for s in symbols)
        return f"select * from yahoo.finance.quotes where symbol in ('{quoted}')"

    async def fetch_quotes(self, symbols: list[str]) -> str:
        yql = self.quotes_query(symbols)
        logger.info(f"Quotes query: {yql}")
        return await self.fetcher.fetch(
            self.quote_host,
            "/v1/public/yql",
            params={"q": yql, "format": "json", "env": YQL_ENV},
            scheme="http",
        )

    async def fetch_metadata(self, symbol: str) -> str:
        """Chart metadata (previous close, canonical ticker) as JSON."""
        return await self.fetcher.fetch(
            self.metadata_host,
            f"/v8/finance/chart/{symbol}",
            params={"range": "1d", "interval": "1d"},
        )

    async def fetch_headlines(self, symbol: str) -> str:
        return await self.fetcher.fetch(
            self.news_host,
            "/rss/2.0/headline",
            params={"s": symbol, "region": "US", "lang": "en-US"},
        )
