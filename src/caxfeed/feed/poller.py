"""Fixed-interval quote poller."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from caxfeed.api.client import quote_url
from caxfeed.api.errors import CaxApiError, DecodeError
from caxfeed.feed.channel import ChannelClosed, Sender

if TYPE_CHECKING:
    from caxfeed.api.client import CaxClient
    from caxfeed.config_loader import PollerConfig

logger = logging.getLogger(__name__)


@dataclass
class PollerStats:
    """Counters for one poller run."""

    ticks: int = 0
    successes: int = 0
    failures: int = 0
    decode_failures: int = 0


class QuotePoller:
    """
    Polls the quote endpoint for one pair on a fixed wall-clock schedule.

    Tick deadlines are ``start + k * interval`` on the event loop clock, so a
    slow fetch never pushes later ticks back; a deadline that has already
    passed fires immediately. Fetch failures are logged and the loop moves on
    to the next tick. The loop ends when the receiver side of the channel is
    closed, when ``stop()``/``request_stop()`` is called, or after
    ``max_ticks`` ticks.
    """

    def __init__(
        self,
        client: CaxClient,
        sender: Sender,
        pair: str,
        interval: float,
        max_ticks: int | None = None,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got: {interval}")
        if max_ticks is not None and max_ticks < 1:
            raise ValueError(f"max_ticks must be at least 1, got: {max_ticks}")

        self.client = client
        self.sender = sender
        self.pair = pair
        self.interval = interval
        self.max_ticks = max_ticks
        self.url = quote_url(client.base_url, pair)
        self.stats = PollerStats()

        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event = asyncio.Event()
        self._stop_requested = False

    @classmethod
    def from_config(
        cls,
        config: PollerConfig,
        client: CaxClient,
        sender: Sender,
        max_ticks: int | None = None,
    ) -> QuotePoller:
        return cls(
            client,
            sender,
            pair=config.pair,
            interval=float(config.interval_seconds),
            max_ticks=max_ticks,
        )

    def stop(self) -> None:
        """Stop before the next tick. Call from the poller's event loop."""
        self._stop_requested = True
        self._stop_event.set()

    def request_stop(self) -> None:
        """Thread-safe variant of ``stop()``."""
        self._stop_requested = True
        loop = self._loop
        if loop is None:
            return
        try:
            loop.call_soon_threadsafe(self._stop_event.set)
        except RuntimeError:
            # Loop already closed; run() has returned
            pass

    async def _wait_until(self, deadline: float) -> bool:
        """Sleep until ``deadline``. Returns True if a stop was requested."""
        assert self._loop is not None
        delay = deadline - self._loop.time()
        if self._stop_requested:
            return True
        if delay <= 0:
            return False
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return self._stop_requested
        return True

    async def _poll_once(self) -> None:
        """Fetch one quote and forward it. Raises ChannelClosed if the consumer is gone."""
        try:
            quote = await self.client.fetch_quote(self.url)
        except DecodeError as e:
            self.stats.failures += 1
            self.stats.decode_failures += 1
            logger.error(f"Quote decode failed, response does not match schema: {e}")
            return
        except CaxApiError as e:
            self.stats.failures += 1
            logger.warning(f"Error fetching quote: {e}")
            return

        self.stats.successes += 1
        logger.debug(f"Received quote: {quote}")
        self.sender.send(quote)

    async def run(self) -> PollerStats:
        """Run until the consumer disconnects or a stop is requested."""
        self._loop = asyncio.get_running_loop()
        deadline = self._loop.time()

        logger.info(f"Polling {self.url} every {self.interval:g}s")

        try:
            while True:
                if self.max_ticks is not None and self.stats.ticks >= self.max_ticks:
                    logger.info(f"Reached {self.max_ticks} ticks, stopping")
                    break

                deadline += self.interval
                if await self._wait_until(deadline):
                    logger.info("Stop requested, poller exiting")
                    break

                if self.sender.is_closed:
                    logger.info("Consumer disconnected, poller exiting")
                    break

                self.stats.ticks += 1
                try:
                    await self._poll_once()
                except ChannelClosed:
                    logger.info("Consumer disconnected, poller exiting")
                    break
        finally:
            self.sender.close()

        logger.info(
            f"Poller finished: {self.stats.ticks} ticks, "
            f"{self.stats.successes} ok, {self.stats.failures} failed"
        )
        return self.stats
