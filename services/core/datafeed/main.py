from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import news, udf
from .config import get_settings
from .errors import DatafeedError
from .resolvers.cache import CacheSweeper
from .services import build_services
from .storage.symbols import SymbolStore


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

store = SymbolStore(settings.symbols_db_path)
services = build_services(settings, store)
sweeper = CacheSweeper(services.cache, settings.history_cache_clear_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup/shutdown."""
    # Startup: open the symbol table and start the cache sweeper
    await store.init()
    udf.set_services(services)
    await sweeper.start()

    yield

    # Shutdown
    await sweeper.stop()
    udf.set_services(None)


app = FastAPI(
    title="UDF Datafeed",
    version="0.1.0",
    lifespan=lifespan,
)


def error_envelope(errmsg: str) -> JSONResponse:
    """UDF clients read errors from the body; the HTTP status is always 200."""
    return JSONResponse({"s": "error", "errmsg": errmsg}, status_code=200)


@app.exception_handler(DatafeedError)
async def datafeed_error_handler(request: Request, exc: DatafeedError) -> JSONResponse:
    logger.info(f"{request.url.path}: {exc}")
    return error_envelope(str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        f"{'.'.join(str(part) for part in err.get('loc', ())[1:])} {err.get('msg', '')}".strip()
        for err in exc.errors()
    ]
    return error_envelope(f"wrong_query: {'; '.join(problems)}")


@app.middleware("http")
async def unexpected_error_envelope(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logger.error(f"Unhandled error serving {request.url.path}: {e}", exc_info=True)
        return error_envelope(str(e) or type(e).__name__)


# Added last so it wraps the error envelope too
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(udf.router)
app.include_router(news.router)
