"""
Converters from raw upstream payloads into UDF series and quote batches.

All functions here are pure: they take the raw body (or decoded JSON) and never
touch the network. The secondary converter never raises, so a malformed
upstream payload cannot take down the history resolver.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from ..errors import EmptyQuotesResponse, MalformedUpstreamPayload
from ..providers.base import (
    STATUS_ERROR,
    STATUS_NO_DATA,
    STATUS_OK,
    Bar,
    Quote,
    QuoteBatch,
    Series,
)
from ..utils.dates import parse_ymd


logger = logging.getLogger(__name__)

# Set by the quote provider on rows for unknown or renamed symbols
QUOTE_ERROR_FIELD = "ErrorIndicationreturnedforsymbolchangedinvalid"

SECONDARY_COLUMNS = ("date", "open", "high", "low", "close", "volume")


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def convert_primary_history(data: str) -> Series:
    """
    Convert primary-provider CSV into a Series.

    Rows arrive most-recent-first as ``date,open,high,low,close,volume``. The
    first line is the column header and the last line is the empty remainder
    after the final newline, so rows are read from the penultimate line back
    to index 1, which also puts them in ascending time order.
    """
    series = Series()
    lines = data.split("\n")

    for i in range(len(lines) - 2, 0, -1):
        items = lines[i].split(",")
        try:
            ts = parse_ymd(items[0])
        except ValueError:
            logger.warning(f"Skipping primary row with unreadable date: {lines[i]!r}")
            continue

        values = [_to_float(items[k]) if k < len(items) else math.nan for k in range(1, 6)]
        series.bars.append(Bar(ts, *values))

    if not series.bars:
        series.status = STATUS_NO_DATA

    return series


def _column_indices(columns: list[dict[str, Any]]) -> dict[str, int]:
    return {column["name"]: i for i, column in enumerate(columns)}


def _parse_secondary(data: str) -> Series:
    try:
        table = json.loads(data)["datatable"]
        rows = table["data"]
        idx = _column_indices(table["columns"])
        positions = [idx[name] for name in SECONDARY_COLUMNS]
        if not isinstance(rows, list):
            raise TypeError(f"datatable.data is {type(rows).__name__}")
    except (ValueError, KeyError, TypeError) as e:
        raise MalformedUpstreamPayload(f"{type(e).__name__}: {e}") from e

    series = Series()
    for row in rows:
        try:
            date, o, h, l, c, v = (row[p] for p in positions)
            series.bars.append(
                Bar(
                    time=parse_ymd(date),
                    open=_from_table(o),
                    high=_from_table(h),
                    low=_from_table(l),
                    close=_from_table(c),
                    volume=_from_table(v),
                )
            )
        except (IndexError, KeyError, ValueError, TypeError, AttributeError) as e:
            raise MalformedUpstreamPayload(f"bad row {row!r}: {e}") from e

    if not series.bars:
        series.status = STATUS_NO_DATA
    return series


def _from_table(value: Any) -> float:
    return math.nan if value is None else float(value)


def convert_secondary_history(data: str) -> Series:
    """
    Convert a secondary-provider datatable into a Series.

    Rows keep the order the provider returned them in. Any structural problem
    is logged and degrades to an empty ``ok`` series.
    """
    try:
        return _parse_secondary(data)
    except MalformedUpstreamPayload as e:
        logger.error(f"Malformed secondary history payload: {e}")
        return Series()


def _percent_change(value: str | None) -> str | None:
    if not value:
        return value
    return value.strip().lstrip("+").rstrip("%")


def convert_quote_batch(ticker_labels: dict[str, str], data: Any) -> QuoteBatch:
    """
    Convert a quote provider response into a QuoteBatch.

    Args:
        ticker_labels: Bare upstream symbol -> caller label (e.g. "AAPL" -> "NASDAQ:AAPL")
        data: Decoded JSON body

    Returns:
        QuoteBatch with one Quote per returned row, or an error batch when the
        response wrapper is missing
    """
    try:
        results = data["query"]["results"]
        if not results:
            raise KeyError("results")
        rows = results["quote"]
    except (KeyError, TypeError):
        error = EmptyQuotesResponse(json.dumps(data))
        logger.error(str(error))
        return QuoteBatch(status=STATUS_ERROR, errmsg=str(error))

    if not isinstance(rows, list):
        rows = [rows]

    batch = QuoteBatch()
    for row in rows:
        symbol = row.get("symbol") or row.get("Symbol")
        label = ticker_labels.get(symbol, symbol)

        if row.get(QUOTE_ERROR_FIELD) or not row.get("StockExchange"):
            batch.quotes.append(Quote(label=label, status=STATUS_ERROR))
            continue

        batch.quotes.append(
            Quote(
                label=label,
                status=STATUS_OK,
                values={
                    "ch": row.get("ChangeRealtime") or row.get("Change"),
                    "chp": _percent_change(row.get("PercentChange") or row.get("ChangeinPercent")),
                    "short_name": row.get("Symbol"),
                    "exchange": row.get("StockExchange"),
                    "original_name": f"{row.get('StockExchange')}:{row.get('Symbol')}",
                    "description": row.get("Name"),
                    "lp": row.get("LastTradePriceOnly"),
                    "ask": row.get("AskRealtime"),
                    "bid": row.get("BidRealtime"),
                    "open_price": row.get("Open"),
                    "high_price": row.get("DaysHigh"),
                    "low_price": row.get("DaysLow"),
                    "prev_close_price": row.get("PreviousClose"),
                    "volume": row.get("Volume"),
                },
            )
        )

    return batch
