"""History resolution: primary provider, time-gated fallback, cached secondary provider."""

from __future__ import annotations

import logging
import time

from ..errors import FetchFailure, UnknownSymbol, UnsupportedResolution
from ..providers.base import serialize_series
from ..providers.quandl import QuandlClient
from ..providers.yahoo import YahooClient
from ..udf.converters import convert_primary_history, convert_secondary_history
from ..utils.dates import iso_date
from .cache import HistoryCache, history_cache_key
from .failover import FailoverBreaker
from .symbols import SymbolSource


logger = logging.getLogger(__name__)

SUPPORTED_RESOLUTIONS = ("d", "w", "m")


def normalize_resolution(resolution: str) -> str:
    value = (resolution or "").strip().lower()
    if value not in SUPPORTED_RESOLUTIONS:
        raise UnsupportedResolution(resolution)
    return value


class HistoryResolver:
    """
    Serves /history from one of two providers, never a mix of both.

    Flow per request:
    1. While the breaker is open, go straight to the secondary provider.
    2. Otherwise resolve the symbol and ask the primary provider.
    3. A primary fetch failure opens the breaker and falls through to the
       secondary provider, whose serialized results are cached by
       symbol and date range. A secondary failure is returned to the caller.
    """

    def __init__(
        self,
        symbols: SymbolSource,
        primary: YahooClient,
        secondary: QuandlClient,
        breaker: FailoverBreaker,
        cache: HistoryCache,
    ):
        self.symbols = symbols
        self.primary = primary
        self.secondary = secondary
        self.breaker = breaker
        self.cache = cache

    async def resolve(
        self,
        symbol: str,
        start_ts: int,
        end_ts: int | None,
        resolution: str,
    ) -> str:
        """
        Args:
            symbol: Symbol name as known to the symbol store
            start_ts: Range start (unix seconds)
            end_ts: Range end (unix seconds); None means open-ended
            resolution: d, w or m (any case)

        Returns:
            Serialized UDF series payload
        """
        resolution = normalize_resolution(resolution)

        if not self.breaker.allows_primary():
            return await self._from_secondary(symbol, start_ts, end_ts)

        info = await self.symbols.lookup_exact(symbol)
        if info is None:
            raise UnknownSymbol(symbol)

        try:
            raw = await self.primary.fetch_history(info["name"], start_ts, end_ts, resolution)
        except FetchFailure as e:
            logger.warning(f"Primary history failed for {symbol} ({e}); trying secondary provider")
            self.breaker.record_failure()
            return await self._from_secondary(symbol, start_ts, end_ts)

        return serialize_series(convert_primary_history(raw))

    async def _from_secondary(self, symbol: str, start_ts: int, end_ts: int | None) -> str:
        start_date = iso_date(start_ts)
        end_date = iso_date(end_ts if end_ts is not None else int(time.time()))
        key = history_cache_key(symbol, start_date, end_date)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Return secondary history from cache: {key}")
            return cached

        raw = await self.secondary.fetch_history(symbol, start_date, end_date)
        payload = serialize_series(convert_secondary_history(raw))
        self.cache.put(key, payload)
        return payload
