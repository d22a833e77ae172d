"""Base types and protocols for upstream data providers."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Protocol


STATUS_OK = "ok"
STATUS_NO_DATA = "no_data"
STATUS_ERROR = "error"


@dataclass
class Bar:
    """Unified OHLCV bar representation."""
    time: int  # Unix timestamp in seconds (UTC midnight for daily bars)
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass
class Series:
    """Bars in provider order plus a UDF status tag."""
    bars: list[Bar] = field(default_factory=list)
    status: str = STATUS_OK

    def to_udf(self) -> dict[str, Any]:
        """Columnar wire form used by the /history endpoint."""
        return {
            "s": self.status,
            "t": [b.time for b in self.bars],
            "o": [_json_number(b.open) for b in self.bars],
            "h": [_json_number(b.high) for b in self.bars],
            "l": [_json_number(b.low) for b in self.bars],
            "c": [_json_number(b.close) for b in self.bars],
            "v": [_json_number(b.volume) for b in self.bars],
        }

    @classmethod
    def from_udf(cls, payload: dict[str, Any]) -> Series:
        columns = [payload.get(k) or [] for k in ("t", "o", "h", "l", "c", "v")]
        bars = [
            Bar(
                time=int(t),
                open=_from_json_number(o),
                high=_from_json_number(h),
                low=_from_json_number(l),
                close=_from_json_number(c),
                volume=_from_json_number(v),
            )
            for t, o, h, l, c, v in zip(*columns)
        ]
        return cls(bars=bars, status=payload.get("s", STATUS_OK))


@dataclass
class Quote:
    """One entry of a quote batch, labelled with the caller's ticker."""
    label: str
    status: str = STATUS_OK
    values: dict[str, Any] = field(default_factory=dict)

    def to_udf(self) -> dict[str, Any]:
        return {"s": self.status, "n": self.label, "v": self.values}


@dataclass
class QuoteBatch:
    status: str = STATUS_OK
    quotes: list[Quote] = field(default_factory=list)
    errmsg: str | None = None

    def to_udf(self) -> dict[str, Any]:
        if self.status == STATUS_ERROR:
            return {"s": STATUS_ERROR, "errmsg": self.errmsg or ""}
        return {"s": self.status, "d": [q.to_udf() for q in self.quotes]}


def serialize_series(series: Series) -> str:
    """Serialize a Series to the compact JSON payload cached and sent to clients."""
    return json.dumps(series.to_udf(), separators=(",", ":"))


def _json_number(value: float) -> float | None:
    # NaN is not valid JSON; clients receive null for unparseable fields
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _from_json_number(value: Any) -> float:
    return math.nan if value is None else float(value)


class Fetcher(Protocol):
    """Protocol for the single-GET upstream fetcher."""

    async def fetch(
        self,
        host: str,
        path: str,
        params: dict[str, Any] | None = None,
        scheme: str = "https",
    ) -> str:
        """
        Return the response body of one GET request.

        Raises FetchFailure on timeout, transport error, or a non-200 status.
        """
        ...
