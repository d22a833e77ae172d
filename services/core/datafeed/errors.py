"""Typed errors raised while serving UDF requests.

Every error renders to the protocol envelope ``{"s": "error", "errmsg": ...}``
using ``str(error)``.
"""

from __future__ import annotations


class DatafeedError(Exception):
    """Base class for datafeed errors."""

    kind = "error"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{self.kind}: {detail}" if detail else self.kind)


class UnknownSymbol(DatafeedError):
    """Raised when the symbol store has no such symbol."""

    kind = "unknown_symbol"


class UnsupportedResolution(DatafeedError):
    """Raised for history resolutions other than d/w/m."""

    kind = "unsupported_resolution"


class WrongQuery(DatafeedError):
    kind = "wrong_query"


class InvalidSymbol(DatafeedError):
    """Raised when the metadata provider answers with something unreadable."""

    kind = "invalid_symbol"


class FetchFailure(DatafeedError):
    """Raised when an upstream GET times out, errors, or returns non-200."""

    kind = "fetch_failure"

    def __init__(self, host: str, status: int | None = None, detail: str = ""):
        self.host = host
        self.status = status
        if status is not None:
            detail = f"{host} returned {status}"
        else:
            detail = f"{host}: {detail}" if detail else host
        super().__init__(detail)


class MalformedUpstreamPayload(DatafeedError):
    """Raised inside converters; never leaves the history resolver."""

    kind = "malformed_upstream_payload"


class EmptyQuotesResponse(DatafeedError):
    kind = "empty_quotes_response"
