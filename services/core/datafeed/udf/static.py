"""Static and demo payloads: /config, /marks, /timescale_marks."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

from ..utils.dates import utc_midnight


DAY = 60 * 60 * 24

EXCHANGES = [
    {"value": "", "name": "All Exchanges", "desc": ""},
    {"value": "XETRA", "name": "XETRA", "desc": "XETRA"},
    {"value": "NSE", "name": "NSE", "desc": "NSE"},
    {"value": "NasdaqNM", "name": "NasdaqNM", "desc": "NasdaqNM"},
    {"value": "NYSE", "name": "NYSE", "desc": "NYSE"},
    {"value": "CDNX", "name": "CDNX", "desc": "CDNX"},
    {"value": "Stuttgart", "name": "Stuttgart", "desc": "Stuttgart"},
]

SYMBOL_TYPES = [
    {"name": "All types", "value": ""},
    {"name": "Stock", "value": "stock"},
    {"name": "Index", "value": "index"},
]


def datafeed_config(supported_resolutions: list[str]) -> dict[str, Any]:
    return {
        "supports_search": True,
        "supports_group_request": False,
        "supports_marks": True,
        "supports_timescale_marks": True,
        "supports_time": True,
        "exchanges": EXCHANGES,
        "symbolsTypes": SYMBOL_TYPES,
        "supportedResolutions": list(supported_resolutions),
    }


def demo_marks(now: float | None = None) -> dict[str, list[Any]]:
    """Chart marks at fixed offsets back from today (UTC)."""
    today = utc_midnight(time.time() if now is None else now)
    return {
        "id": [0, 1, 2, 3, 4, 5],
        "time": [today, today - DAY * 4, today - DAY * 7, today - DAY * 7, today - DAY * 15, today - DAY * 30],
        "color": ["red", "blue", "green", "red", "blue", "green"],
        "text": [
            "Today",
            "4 days back",
            "7 days back + Lorem ipsum dolor sit amet, consectetur adipiscing elit, "
            "sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
            "7 days back once again",
            "15 days back",
            "30 days back",
        ],
        "label": ["A", "B", "CORE", "D", "EURO", "F"],
        "labelFontColor": ["white", "white", "red", "#FFFFFF", "white", "#000"],
        "minSize": [14, 28, 7, 40, 7, 14],
    }


def _date_string(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%a %b %d %Y")


def demo_timescale_marks(now: float | None = None) -> list[dict[str, Any]]:
    today = utc_midnight(time.time() if now is None else now)
    return [
        {"id": "tsm1", "time": today, "color": "red", "label": "A", "tooltip": ""},
        {
            "id": "tsm2",
            "time": today - DAY * 4,
            "color": "blue",
            "label": "D",
            "tooltip": ["Dividends: $0.56", "Date: " + _date_string(today - DAY * 4)],
        },
        {
            "id": "tsm3",
            "time": today - DAY * 7,
            "color": "green",
            "label": "D",
            "tooltip": ["Dividends: $3.46", "Date: " + _date_string(today - DAY * 7)],
        },
        {
            "id": "tsm4",
            "time": today - DAY * 15,
            "color": "#999999",
            "label": "E",
            "tooltip": ["Earnings: $3.44", "Estimate: $3.60"],
        },
        {
            "id": "tsm7",
            "time": today - DAY * 30,
            "color": "red",
            "label": "E",
            "tooltip": ["Earnings: $5.40", "Estimate: $5.00"],
        },
    ]
