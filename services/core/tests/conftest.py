"""Shared pytest fixtures and fakes."""

from __future__ import annotations

import json
from typing import Any

import pytest

from datafeed.errors import FetchFailure
from datafeed.providers.quandl import QuandlClient
from datafeed.providers.yahoo import YahooClient
from datafeed.resolvers.cache import InMemoryHistoryCache
from datafeed.resolvers.failover import FailoverBreaker, InMemoryFailureMemory
from datafeed.resolvers.history import HistoryResolver


PRIMARY_HOST = "primary.test"
SECONDARY_HOST = "secondary.test"
QUOTE_HOST = "quotes.test"
METADATA_HOST = "meta.test"
NEWS_HOST = "news.test"

# Most-recent-first, header first, trailing newline: the primary provider's CSV layout
PRIMARY_CSV = (
    "Date,Open,High,Low,Close,Volume\n"
    "2020-01-03,297.15,300.58,296.50,297.43,36633400\n"
    "2020-01-02,296.24,300.60,295.19,300.35,33911900\n"
)

SECONDARY_JSON = json.dumps({
    "datatable": {
        "data": [
            ["AAPL", "2020-01-02", 296.24, 300.6, 295.19, 300.35, 33911900.0],
            ["AAPL", "2020-01-03", 297.15, 300.58, 296.5, 297.43, 36633400.0],
        ],
        "columns": [
            {"name": "ticker", "type": "String"},
            {"name": "date", "type": "Date"},
            {"name": "open", "type": "BigDecimal(34,12)"},
            {"name": "high", "type": "BigDecimal(34,12)"},
            {"name": "low", "type": "BigDecimal(34,12)"},
            {"name": "close", "type": "BigDecimal(34,12)"},
            {"name": "volume", "type": "BigDecimal(37,15)"},
        ],
    },
    "meta": {"next_cursor_id": None},
})


class FakeFetcher:
    """Returns canned bodies per host; an exception instance is raised instead."""

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str, dict[str, Any] | None, str]] = []

    async def fetch(self, host, path, params=None, scheme="https"):
        self.calls.append((host, path, params, scheme))
        response = self.responses.get(host)
        if response is None:
            raise FetchFailure(host, status=404)
        if isinstance(response, Exception):
            raise response
        return response

    def calls_to(self, host: str) -> list[tuple[str, str, dict[str, Any] | None, str]]:
        return [c for c in self.calls if c[0] == host]


class FakeSymbolStore:
    def __init__(self, symbols: list[dict[str, Any]] | None = None):
        self.symbols = {s["name"]: s for s in (symbols or [])}
        self.lookups: list[str] = []
        self.searches: list[tuple] = []

    async def search(self, query, type=None, exchange=None, max_records=50):
        self.searches.append((query, type, exchange, max_records))
        return [
            {
                "symbol": s["name"],
                "full_name": s["name"],
                "description": s["description"],
                "exchange": s["exchange"],
                "type": s["type"],
            }
            for s in self.symbols.values()
            if query.lower() in s["name"].lower()
        ]

    async def lookup_exact(self, name):
        self.lookups.append(name)
        return self.symbols.get(name)


class FakeClock:
    def __init__(self, now: float = 1_600_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


AAPL = {"name": "AAPL", "description": "Apple Inc.", "exchange": "NasdaqNM", "type": "stock"}
SPX = {"name": "^GSPC", "description": "", "exchange": "SNP", "type": "index"}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def symbol_store() -> FakeSymbolStore:
    return FakeSymbolStore([AAPL, SPX])


@pytest.fixture
def breaker(clock) -> FailoverBreaker:
    return FailoverBreaker(InMemoryFailureMemory(), cooldown_seconds=3600, clock=clock)


def make_yahoo(fetcher) -> YahooClient:
    return YahooClient(
        fetcher,
        history_host=PRIMARY_HOST,
        quote_host=QUOTE_HOST,
        metadata_host=METADATA_HOST,
        news_host=NEWS_HOST,
    )


def make_history_resolver(fetcher, store, breaker, cache=None) -> HistoryResolver:
    return HistoryResolver(
        store,
        make_yahoo(fetcher),
        QuandlClient(fetcher, "test-key", host=SECONDARY_HOST),
        breaker,
        cache if cache is not None else InMemoryHistoryCache(),
    )


def quote_row(symbol: str, **overrides) -> dict[str, Any]:
    """One row of a YQL yahoo.finance.quotes response."""
    row = {
        "symbol": symbol,
        "Symbol": symbol,
        "StockExchange": "NMS",
        "Name": f"{symbol} Corp",
        "Change": "+1.20",
        "ChangeinPercent": "+0.40%",
        "LastTradePriceOnly": "300.35",
        "AskRealtime": "300.40",
        "BidRealtime": "300.30",
        "Open": "296.24",
        "DaysHigh": "300.60",
        "DaysLow": "295.19",
        "PreviousClose": "299.15",
        "Volume": "33911900",
    }
    row.update(overrides)
    return row
