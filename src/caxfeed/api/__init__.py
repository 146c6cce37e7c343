"""CAX REST API - fetch and decode layer."""

from caxfeed.api.client import (
    CaxClient,
    fetch_order_books,
    fetch_quote,
    orderbooks_url,
    quote_url,
)
from caxfeed.api.decode import decode_order_books, decode_quote
from caxfeed.api.errors import CaxApiError, DecodeError, HttpStatusError, TransportError
from caxfeed.api.models import OrderBook, Quote

__all__ = [
    "CaxClient",
    "fetch_order_books",
    "fetch_quote",
    "orderbooks_url",
    "quote_url",
    "decode_order_books",
    "decode_quote",
    "CaxApiError",
    "DecodeError",
    "HttpStatusError",
    "TransportError",
    "OrderBook",
    "Quote",
]
