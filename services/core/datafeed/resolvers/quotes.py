"""Batch quote resolution. No caching, no fallback."""

from __future__ import annotations

import json
import logging

from ..errors import EmptyQuotesResponse, FetchFailure
from ..providers.base import STATUS_ERROR, QuoteBatch
from ..providers.yahoo import YahooClient
from ..udf.converters import convert_quote_batch


logger = logging.getLogger(__name__)


def split_tickers(tickers: str) -> dict[str, str]:
    """Map bare symbols to caller labels: "NYSE:IBM,AAPL" -> {"IBM": "NYSE:IBM", "AAPL": "AAPL"}."""
    labels: dict[str, str] = {}
    for ticker in tickers.split(","):
        ticker = ticker.strip()
        if not ticker:
            continue
        labels[ticker.rsplit(":", 1)[-1]] = ticker
    return labels


def _order_like(batch: QuoteBatch, labels: dict[str, str]) -> QuoteBatch:
    order = {label: i for i, label in enumerate(labels.values())}
    batch.quotes.sort(key=lambda q: order.get(q.label, len(order)))
    return batch


class QuoteResolver:
    def __init__(self, provider: YahooClient):
        self.provider = provider

    async def resolve(self, tickers: str) -> QuoteBatch:
        """
        Fetch quotes for a comma-separated ticker list in one upstream call.

        Quotes come back in the caller's order, each labelled with the ticker
        exactly as the caller sent it.
        """
        labels = split_tickers(tickers)
        if not labels:
            return QuoteBatch(status=STATUS_ERROR, errmsg="wrong_query: no symbols")

        try:
            raw = await self.provider.fetch_quotes(list(labels))
        except FetchFailure as e:
            return QuoteBatch(status=STATUS_ERROR, errmsg=str(e))

        try:
            data = json.loads(raw)
        except ValueError:
            error = EmptyQuotesResponse(raw[:200])
            logger.error(str(error))
            return QuoteBatch(status=STATUS_ERROR, errmsg=str(error))

        batch = convert_quote_batch(labels, data)
        if batch.status == STATUS_ERROR:
            return batch
        return _order_like(batch, labels)
