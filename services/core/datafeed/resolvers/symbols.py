"""Symbol descriptors for /symbols and search delegation for /search."""

from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Protocol

from ..errors import FetchFailure, InvalidSymbol, UnknownSymbol, WrongQuery
from ..providers.yahoo import YahooClient
from .failover import FailoverBreaker


logger = logging.getLogger(__name__)


class SymbolSource(Protocol):
    """External symbol table: fuzzy search plus exact lookup."""

    async def search(
        self,
        query: str,
        type: Optional[str] = None,
        exchange: Optional[str] = None,
        max_records: Any = 50,
    ) -> list[dict[str, Any]]:
        ...

    async def lookup_exact(self, name: str) -> Optional[dict[str, Any]]:
        ...


def price_scale(previous_close: Any) -> int:
    """
    Scale from the number of decimals in the last close.

    Only correct for instruments whose minimal move is a power of ten.
    """
    try:
        # Positional notation, so 1e-05 counts as five decimals
        text = format(Decimal(str(previous_close)), "f")
    except InvalidOperation:
        text = str(previous_close)
    if "." in text and text.index(".") > 0:
        return 10 ** len(text.split(".")[1])
    return 10


class SymbolResolver:
    def __init__(
        self,
        store: SymbolSource,
        metadata: YahooClient,
        breaker: FailoverBreaker,
        supported_resolutions: list[str],
    ):
        self.store = store
        self.metadata = metadata
        self.breaker = breaker
        self.supported_resolutions = supported_resolutions

    async def search(
        self,
        query: str,
        type: Optional[str],
        exchange: Optional[str],
        max_records: Optional[str],
    ) -> list[dict[str, Any]]:
        if not max_records:
            raise WrongQuery("limit is required")
        return await self.store.search(query, type, exchange, max_records)

    def _default_info(self, symbol: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": symbol["name"],
            "exchange-traded": symbol["exchange"],
            "exchange-listed": symbol["exchange"],
            "timezone": "America/New_York",
            "minmov": 1,
            "minmov2": 0,
            "pointvalue": 1,
            "session": "0930-1630",
            "has_intraday": False,
            "has_no_volume": symbol["type"] != "stock",
            "description": symbol["description"] or symbol["name"],
            "type": symbol["type"],
            "supported_resolutions": list(self.supported_resolutions),
            "pricescale": 100,
            "ticker": symbol["name"].upper(),
        }

    async def symbol_info(self, name: str) -> dict[str, Any]:
        symbol = await self.store.lookup_exact(name)
        if symbol is None:
            raise UnknownSymbol(name)

        info = self._default_info(symbol)

        # Skip the metadata round-trip while Yahoo is known to be failing
        if not self.breaker.allows_primary():
            return info

        try:
            raw = await self.metadata.fetch_metadata(symbol["name"])
        except FetchFailure as e:
            logger.warning(f"Symbol metadata unavailable for {name}: {e}")
            return info

        try:
            data = json.loads(raw)
        except ValueError:
            raise InvalidSymbol(name)

        try:
            meta = data["chart"]["result"][0]["meta"]
            previous_close = meta.get("previousClose", meta.get("chartPreviousClose"))
            if previous_close is None:
                raise KeyError("previousClose")
            info.update({
                "pricescale": price_scale(previous_close),
                "ticker": meta["symbol"].upper(),
            })
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            logger.error(f"Unexpected metadata payload for {name}: {e!r}")

        return info
