"""Consumer side: turns quotes into an ordered price-point series."""

from __future__ import annotations

import logging
from collections.abc import Callable

from caxfeed.api.models import Quote
from caxfeed.data.market_data import PricePoint
from caxfeed.feed.channel import Receiver

logger = logging.getLogger(__name__)


class PriceAccumulator:
    """
    Appends one PricePoint per received quote, in arrival order.

    Owned by a single consumer thread; points are never removed.
    """

    def __init__(self, on_point: Callable[[PricePoint], None] | None = None):
        self._points: list[PricePoint] = []
        self.on_point = on_point

    def __len__(self) -> int:
        return len(self._points)

    @property
    def points(self) -> tuple[PricePoint, ...]:
        """Snapshot of all points so far."""
        return tuple(self._points)

    @property
    def latest(self) -> PricePoint | None:
        return self._points[-1] if self._points else None

    def add(self, quote: Quote) -> PricePoint:
        point = PricePoint.from_quote(quote)
        self._points.append(point)
        logger.info(f"{point.timestamp} mid={point.price:.6g} ({len(self._points)} points)")
        if self.on_point:
            self.on_point(point)
        return point

    def run(self, receiver: Receiver) -> tuple[PricePoint, ...]:
        """Consume until the producer is done and the buffer is drained."""
        for quote in receiver:
            self.add(quote)
        logger.info(f"Quote stream ended after {len(self._points)} points")
        return self.points
