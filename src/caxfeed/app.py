"""caxfeed Main Application."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from caxfeed.api.client import CaxClient
from caxfeed.config_loader import AppConfig, load_config_with_overrides
from caxfeed.constants import LOG_FORMAT
from caxfeed.data.market_data import PricePoint
from caxfeed.feed.accumulator import PriceAccumulator
from caxfeed.feed.channel import Sender, open_channel
from caxfeed.feed.poller import PollerStats, QuotePoller

logger = logging.getLogger(__name__)


class QuoteFeedApp:
    """
    Wires the poller and the accumulator across a thread boundary.

    The poller runs on a background thread with its own event loop; the
    accumulator runs on the thread that calls ``run()``. The two only share
    the channel.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        *,
        config: AppConfig | None = None,
        pair: str | None = None,
        interval_seconds: int | None = None,
        base_url: str | None = None,
        log_level: str | None = None,
        max_ticks: int | None = None,
        on_point: Callable[[PricePoint], None] | None = None,
    ):
        self.config_path = Path(config_path) if config_path else None
        self.config = config
        self._overrides = {
            "pair": pair,
            "interval_seconds": interval_seconds,
            "base_url": base_url,
            "log_level": log_level,
        }
        self.max_ticks = max_ticks

        self.accumulator = PriceAccumulator(on_point=on_point)
        self.client: CaxClient | None = None
        self.poller: QuotePoller | None = None
        self.stats: PollerStats | None = None

        self._producer_thread: threading.Thread | None = None
        self._producer_error: BaseException | None = None

    def _setup_logging(self) -> None:
        logging.basicConfig(level=self.config.environment.log_level.value, format=LOG_FORMAT)

    def initialize(self) -> None:
        """Load config and build components."""
        if self.config is None:
            self.config = load_config_with_overrides(self.config_path, **self._overrides)
        self._setup_logging()
        logger.info(
            f"Initializing caxfeed for {self.config.poller.pair} "
            f"every {self.config.poller.interval_seconds}s"
        )

        self.client = CaxClient(
            base_url=self.config.api.base_url,
            timeout=self.config.api.timeout_seconds,
        )

    async def _poll(self) -> PollerStats:
        async with self.client:
            return await self.poller.run()

    def _produce(self, sender: Sender) -> None:
        """Producer thread body."""
        try:
            self.stats = asyncio.run(self._poll())
        except Exception as e:
            self._producer_error = e
            logger.error(f"Poller crashed: {e}", exc_info=True)
        finally:
            sender.close()

    def run(self) -> tuple[PricePoint, ...]:
        """Poll until interrupted (or ``max_ticks``) and return the accumulated points."""
        if self.client is None:
            self.initialize()

        sender, receiver = open_channel()
        self.poller = QuotePoller.from_config(
            self.config.poller, self.client, sender, max_ticks=self.max_ticks
        )

        self._producer_thread = threading.Thread(
            target=self._produce, args=(sender,), name="caxfeed-poller", daemon=True
        )
        self._producer_thread.start()

        try:
            self.accumulator.run(receiver)
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down...")
        finally:
            receiver.close()
            self.poller.request_stop()
            self._producer_thread.join()
            logger.info("Shutdown complete.")

        if self._producer_error is not None:
            raise RuntimeError("quote poller failed") from self._producer_error

        return self.accumulator.points
