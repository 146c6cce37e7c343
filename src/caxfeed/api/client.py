"""Async CAX REST client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

import aiohttp

from caxfeed.api.decode import decode_order_books, decode_quote
from caxfeed.api.errors import HttpStatusError, TransportError
from caxfeed.api.models import OrderBook, Quote
from caxfeed.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ORDERBOOKS_PATH,
    QUOTE_PATH_TEMPLATE,
    USER_AGENT,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def orderbooks_url(base_url: str) -> str:
    """Build the order book listing URL."""
    return f"{base_url.rstrip('/')}/{ORDERBOOKS_PATH}"


def quote_url(base_url: str, pair: str) -> str:
    """Build the quote URL for a trading pair."""
    return f"{base_url.rstrip('/')}/{QUOTE_PATH_TEMPLATE.format(pair=pair)}"


class CaxClient:
    """
    Thin GET-only client for the CAX REST API.

    One ``aiohttp.ClientSession`` is created lazily and reused until
    ``close()``. Every call is a single request/response cycle: no retries,
    no caching.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> CaxClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Create the HTTP session or reuse the open one."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get(self, url: str, decode: Callable[[bytes], T]) -> T:
        session = await self._ensure_session()

        try:
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise HttpStatusError(response.status, url, response.reason)
                body = await response.read()
        except asyncio.TimeoutError as e:
            raise TransportError(url, f"timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(url, str(e) or e.__class__.__name__) from e

        logger.debug(f"GET {url} -> {len(body)} bytes")
        return decode(body)

    async def fetch_order_books(self, url: str) -> list[OrderBook]:
        """
        Fetch and decode the order book listing at ``url``.

        Raises:
            HttpStatusError: Non-2xx response; the body is not parsed.
            TransportError: Connection, DNS, TLS or timeout failure.
            DecodeError: Malformed JSON or an unparseable numeric field.
        """
        return await self._get(url, decode_order_books)

    async def fetch_quote(self, url: str) -> Quote:
        """Fetch and decode a single quote at ``url``. Same errors as ``fetch_order_books``."""
        return await self._get(url, decode_quote)

    async def get_order_books(self) -> list[OrderBook]:
        return await self.fetch_order_books(orderbooks_url(self.base_url))

    async def get_quote(self, pair: str) -> Quote:
        return await self.fetch_quote(quote_url(self.base_url, pair))


async def fetch_order_books(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> list[OrderBook]:
    """One-shot order book fetch with a short-lived client."""
    async with CaxClient(timeout=timeout) as client:
        return await client.fetch_order_books(url)


async def fetch_quote(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> Quote:
    """One-shot quote fetch with a short-lived client."""
    async with CaxClient(timeout=timeout) as client:
        return await client.fetch_quote(url)
