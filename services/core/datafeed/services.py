"""Wiring of stores, provider clients and resolvers from Settings."""

from __future__ import annotations

from dataclasses import dataclass

from .config import Settings
from .providers.http import HttpFetcher
from .providers.quandl import QuandlClient
from .providers.rss import FuturesNewsClient
from .providers.yahoo import YahooClient
from .resolvers.cache import HistoryCache, InMemoryHistoryCache
from .resolvers.failover import FailoverBreaker, InMemoryFailureMemory
from .resolvers.history import HistoryResolver
from .resolvers.quotes import QuoteResolver
from .resolvers.symbols import SymbolResolver, SymbolSource
from .storage.symbols import SymbolStore


@dataclass
class DatafeedServices:
    settings: Settings
    store: SymbolSource
    yahoo: YahooClient
    futures_news: FuturesNewsClient
    breaker: FailoverBreaker
    cache: HistoryCache
    history: HistoryResolver
    quotes: QuoteResolver
    symbols: SymbolResolver


def build_services(settings: Settings, store: SymbolSource | None = None) -> DatafeedServices:
    fetcher = HttpFetcher(timeout_seconds=settings.fetch_timeout_seconds)
    store = store or SymbolStore(settings.symbols_db_path)

    yahoo = YahooClient(
        fetcher,
        history_host=settings.primary_history_host,
        quote_host=settings.quote_host,
        metadata_host=settings.metadata_host,
        news_host=settings.news_host,
    )
    quandl = QuandlClient(fetcher, settings.quandl_api_key, host=settings.secondary_history_host)
    breaker = FailoverBreaker(InMemoryFailureMemory(), settings.failover_cooldown_seconds)
    cache = InMemoryHistoryCache()

    return DatafeedServices(
        settings=settings,
        store=store,
        yahoo=yahoo,
        futures_news=FuturesNewsClient(fetcher, host=settings.futures_news_host),
        breaker=breaker,
        cache=cache,
        history=HistoryResolver(store, yahoo, quandl, breaker, cache),
        quotes=QuoteResolver(yahoo),
        symbols=SymbolResolver(store, yahoo, breaker, settings.get_supported_resolutions()),
    )
