"""CAX API wire models."""

from __future__ import annotations

import numpy as np
from pydantic import BaseModel, ConfigDict

from caxfeed.api.fields import StrF32, StrF64


class OrderBook(BaseModel):
    """Static trading-pair parameters returned by ``GET /orderbooks``."""

    model_config = ConfigDict(frozen=True)

    pair: str
    base: str
    quote: str
    min_amount: StrF32
    tick_size: StrF32


class Quote(BaseModel):
    """Best bid/ask snapshot returned by ``GET /orderbooks/{pair}/quote``."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    bid_price: StrF32
    bid_amount: StrF64
    ask_price: StrF32
    ask_amount: StrF64

    @property
    def mid_price(self) -> float:
        """(bid + ask) / 2 in single precision."""
        mid = (np.float32(self.bid_price) + np.float32(self.ask_price)) / np.float32(2)
        return float(mid)

    @property
    def spread(self) -> float:
        return float(np.float32(self.ask_price) - np.float32(self.bid_price))
