"""RSS proxy endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..errors import FetchFailure
from ..services import DatafeedServices
from .udf import get_services


logger = logging.getLogger(__name__)

router = APIRouter(tags=["news"])

NEWS_ERROR = {"s": "error", "errmsg": "Failed to get news"}


@router.get("/news")
async def get_news(symbol: str, services: DatafeedServices = Depends(get_services)) -> Response:
    try:
        feed = await services.yahoo.fetch_headlines(symbol)
    except FetchFailure as e:
        logger.warning(f"News feed failed for {symbol}: {e}")
        return JSONResponse(NEWS_ERROR)
    return PlainTextResponse(feed)


@router.get("/futuresmag")
async def get_futuresmag(services: DatafeedServices = Depends(get_services)) -> Response:
    try:
        feed = await services.futures_news.fetch_feed()
    except FetchFailure as e:
        logger.warning(f"Futures news feed failed: {e}")
        return JSONResponse(NEWS_ERROR)
    return PlainTextResponse(feed)
