"""
UDF endpoints consumed by the charting frontend.

Errors raised here are rendered by the handlers in main.py as
``{"s": "error", "errmsg": ...}`` with HTTP 200.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response
from typing import Any, Dict, List, Optional
import logging
import time

from ..services import DatafeedServices
from ..udf.static import datafeed_config, demo_marks, demo_timescale_marks

logger = logging.getLogger(__name__)

router = APIRouter(tags=["udf"])

# Services instance (set by main.py)
_services: DatafeedServices | None = None


def set_services(services: DatafeedServices | None):
    """Set the services instance."""
    global _services
    _services = services


def get_services() -> DatafeedServices:
    """Get the services instance."""
    if _services is None:
        raise RuntimeError("Datafeed services not initialized")
    return _services


@router.get("/config")
async def get_config(services: DatafeedServices = Depends(get_services)) -> Dict[str, Any]:
    return datafeed_config(services.settings.get_supported_resolutions())


@router.get("/symbols")
async def get_symbol_info(
    symbol: str = Query(..., min_length=1),
    services: DatafeedServices = Depends(get_services),
) -> Dict[str, Any]:
    return await services.symbols.symbol_info(symbol)


@router.get("/search")
async def search_symbols(
    query: str = "",
    type: Optional[str] = None,
    exchange: Optional[str] = None,
    limit: Optional[str] = None,
    services: DatafeedServices = Depends(get_services),
) -> List[Dict[str, Any]]:
    return await services.symbols.search(query, type, exchange, limit)


@router.get("/history")
async def get_history(
    symbol: str,
    resolution: str,
    from_: int = Query(..., alias="from"),
    to: Optional[int] = None,
    services: DatafeedServices = Depends(get_services),
) -> Response:
    """
    Bars for a symbol and date range.

    The payload is served pre-serialized (it may come straight from the
    history cache), so Content-Length is its byte length.
    """
    payload = await services.history.resolve(symbol, from_, to, resolution)
    return Response(content=payload, media_type="application/json")


@router.get("/quotes")
async def get_quotes(
    symbols: str,
    services: DatafeedServices = Depends(get_services),
) -> Dict[str, Any]:
    batch = await services.quotes.resolve(symbols)
    return batch.to_udf()


@router.get("/marks")
async def get_marks() -> Dict[str, List[Any]]:
    return demo_marks()


@router.get("/timescale_marks")
async def get_timescale_marks() -> List[Dict[str, Any]]:
    return demo_timescale_marks()


@router.get("/time", response_class=PlainTextResponse)
async def get_time() -> str:
    return str(int(time.time()))
