"""Market data structures and types."""

from __future__ import annotations

from dataclasses import dataclass

from caxfeed.api.models import Quote


@dataclass(frozen=True)
class PricePoint:
    """Mid-price sample derived from a quote."""

    timestamp: str
    price: float

    @classmethod
    def from_quote(cls, quote: Quote) -> PricePoint:
        return cls(timestamp=quote.timestamp, price=quote.mid_price)
