"""Decode raw response bodies into wire models."""

from __future__ import annotations

from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

from caxfeed.api.errors import DecodeError
from caxfeed.api.models import OrderBook, Quote

T = TypeVar("T")

_ORDER_BOOKS = TypeAdapter(list[OrderBook])
_QUOTE = TypeAdapter(Quote)


def _error_from_validation(exc: ValidationError) -> DecodeError:
    """Map the first pydantic error to a DecodeError naming its field path."""
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", str(exc))
    if exc.error_count() > 1:
        message += f" (+{exc.error_count() - 1} more)"
    return DecodeError(message, field=loc or None)


def _decode(adapter: TypeAdapter[T], body: str | bytes) -> T:
    try:
        return adapter.validate_json(body)
    except ValidationError as e:
        raise _error_from_validation(e) from e


def decode_order_books(body: str | bytes) -> list[OrderBook]:
    """Decode a JSON array of order books."""
    return _decode(_ORDER_BOOKS, body)


def decode_quote(body: str | bytes) -> Quote:
    """Decode a single JSON quote object."""
    return _decode(_QUOTE, body)
