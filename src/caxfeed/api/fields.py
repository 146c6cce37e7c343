"""Field-level coercion for numbers the API sends as decimal strings."""

from __future__ import annotations

import math
import re
from fractions import Fraction
from typing import Annotated, Any

import numpy as np
from pydantic import BeforeValidator

from caxfeed.constants import FloatWidth

# Plain decimal literal: optional sign, digits with optional fraction, optional exponent.
# No whitespace, underscores, hex or inf/nan spellings.
DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

_F32_INF = np.float32(np.inf)


def _f32_is_even(x: np.float32) -> bool:
    return (int(np.array([x], dtype=np.float32).view(np.uint32)[0]) & 1) == 0


def _nearest_f32(value: str, narrowed: np.float32) -> np.float32:
    """
    Correctly round a decimal literal to single precision.

    ``narrowed`` went decimal -> f64 -> f32, and the first rounding can land
    exactly on an f32 halfway point. The true nearest f32 is always
    ``narrowed`` or one of its neighbours, so pick it by exact comparison,
    ties to even.
    """
    exact = Fraction(value)
    best = narrowed
    best_dist = abs(Fraction(float(narrowed)) - exact)
    for candidate in (np.nextafter(narrowed, -_F32_INF), np.nextafter(narrowed, _F32_INF)):
        if not np.isfinite(candidate):
            continue
        dist = abs(Fraction(float(candidate)) - exact)
        if dist < best_dist or (dist == best_dist and _f32_is_even(candidate)):
            best, best_dist = candidate, dist
    return best


def parse_decimal_string(value: Any, width: FloatWidth = FloatWidth.F64) -> float:
    """
    Parse a wire decimal string into a finite float.

    Args:
        value: Raw JSON value. Must be a ``str``.
        width: ``FloatWidth.F32`` rounds the result to single precision.

    Returns:
        The parsed value as a Python float.

    Raises:
        ValueError: If the value is not a string, not a decimal literal,
            or does not fit the requested width.
    """
    if not isinstance(value, str):
        raise ValueError(f"expected a decimal string, got {type(value).__name__}")
    if not DECIMAL_PATTERN.match(value):
        raise ValueError(f"invalid decimal string: {value!r}")

    parsed = float(value)
    if not math.isfinite(parsed):
        raise ValueError(f"decimal string out of range: {value!r}")

    if width == FloatWidth.F32:
        with np.errstate(over="ignore"):
            narrowed = np.float32(parsed)
        if not np.isfinite(narrowed):
            raise ValueError(f"decimal string out of 32-bit float range: {value!r}")
        return float(_nearest_f32(value, narrowed))

    return parsed


def _to_f32(value: Any) -> float:
    return parse_decimal_string(value, FloatWidth.F32)


def _to_f64(value: Any) -> float:
    return parse_decimal_string(value, FloatWidth.F64)


# Annotated field types used by the wire models
StrF32 = Annotated[float, BeforeValidator(_to_f32)]
StrF64 = Annotated[float, BeforeValidator(_to_f64)]
