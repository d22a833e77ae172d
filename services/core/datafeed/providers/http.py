"""Single-request upstream fetcher over aiohttp."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from ..errors import FetchFailure


logger = logging.getLogger(__name__)


class HttpFetcher:
    """Issues one GET per call; no retries (fallback policy lives in the resolvers)."""

    def __init__(self, timeout_seconds: float = 5.0):
        """
        Initialize fetcher.

        Args:
            timeout_seconds: Idle socket timeout applied to connect and to each read
        """
        self.timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=timeout_seconds,
            sock_read=timeout_seconds,
        )

    async def fetch(
        self,
        host: str,
        path: str,
        params: dict[str, Any] | None = None,
        scheme: str = "https",
    ) -> str:
        """
        Fetch a body from an upstream provider.

        Args:
            host: Provider host, optionally with a port (e.g. "www.quandl.com")
            path: Request path starting with "/"
            params: Query parameters, URL-encoded by aiohttp
            scheme: "https" or "http" depending on the provider

        Returns:
            Response body decoded as text

        Raises:
            FetchFailure: on timeout, transport error or non-200 status
        """
        url = f"{scheme}://{host}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, params=params) as response:
                    if response.status != 200:
                        logger.warning(f"{host} returned {response.status} for {path}")
                        raise FetchFailure(host, status=response.status)
                    try:
                        return await response.text()
                    except UnicodeDecodeError as e:
                        logger.warning(f"Undecodable body from {url}: {e}")
                        raise FetchFailure(host, detail="undecodable body") from e

        except asyncio.TimeoutError:
            logger.warning(f"Timeout fetching {url}")
            raise FetchFailure(host, detail="timeout")
        except aiohttp.ClientError as e:
            logger.warning(f"Problem with request to {url}: {e}")
            raise FetchFailure(host, detail=str(e) or type(e).__name__)
