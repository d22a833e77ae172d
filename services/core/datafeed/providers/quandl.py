"""Quandl WIKI/PRICES datatable: the secondary history provider."""

from __future__ import annotations

import logging

from .base import Fetcher


logger = logging.getLogger(__name__)


class QuandlClient:
    """Fetches daily bars for a ticker between two ISO dates."""

    path = "/api/v3/datatables/WIKI/PRICES.json"

    def __init__(self, fetcher: Fetcher, api_key: str | None, host: str = "www.quandl.com"):
        self.fetcher = fetcher
        self.api_key = api_key
        self.host = host
        if not api_key:
            logger.warning("quandl_api_key is not set; secondary history requests will be rejected upstream.")

    async def fetch_history(self, symbol: str, start_date: str, end_date: str) -> str:
        """
        Args:
            symbol: Ticker as stored upstream (e.g. "AAPL")
            start_date: Inclusive "yyyy-mm-dd"
            end_date: Inclusive "yyyy-mm-dd"
        """
        logger.info(f"Sending request to quandl for symbol {symbol} ({start_date}..{end_date})")
        params = {
            "api_key": self.api_key or "",
            "ticker": symbol,
            "date.gte": start_date,
            "date.lte": end_date,
        }
        return await self.fetcher.fetch(self.host, self.path, params=params)
