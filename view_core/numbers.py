"""Optional-float arithmetic and function value range estimation.

A function sampled for plotting may be undefined at some points (``None``)
or produce NaN. ``merge_min``/``merge_max`` ignore such samples: a ``None``
operand yields the other operand, a NaN operand yields the other operand, so
the result is NaN only when both operands are NaN.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from .axes import AxisRange
from .errors import InvalidArgument

OptionalFloat = Optional[float]
SampledFunction = Callable[[float], OptionalFloat]

DEFAULT_SAMPLE_COUNT = 100


def merge_min(a: OptionalFloat, b: OptionalFloat) -> OptionalFloat:
    if a is None:
        return b
    if b is None:
        return a
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return min(a, b)


def merge_max(a: OptionalFloat, b: OptionalFloat) -> OptionalFloat:
    if a is None:
        return b
    if b is None:
        return a
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


def interpolate(lo: float, hi: float, steps: int) -> List[float]:
    """``steps`` evenly spaced values from lo to hi, both included."""
    if steps < 2:
        raise InvalidArgument(f"At least 2 samples are needed, got {steps}")
    return [lo + (hi - lo) * i / (steps - 1) for i in range(steps)]


def estimate_min_value(
    fn: SampledFunction, lo: float, hi: float, steps: int = DEFAULT_SAMPLE_COUNT
) -> OptionalFloat:
    result: OptionalFloat = None
    for x in interpolate(lo, hi, steps):
        result = merge_min(result, fn(x))
    return result


def estimate_max_value(
    fn: SampledFunction, lo: float, hi: float, steps: int = DEFAULT_SAMPLE_COUNT
) -> OptionalFloat:
    result: OptionalFloat = None
    for x in interpolate(lo, hi, steps):
        result = merge_max(result, fn(x))
    return result


def estimate_value_range(
    fn: SampledFunction, lo: float, hi: float, steps: int = DEFAULT_SAMPLE_COUNT
) -> Optional[AxisRange]:
    """Sampled [min, max] of ``fn`` on [lo, hi]; None if no finite sample."""
    y_min = estimate_min_value(fn, lo, hi, steps)
    y_max = estimate_max_value(fn, lo, hi, steps)
    if y_min is None or y_max is None:
        return None
    if not (math.isfinite(y_min) and math.isfinite(y_max)):
        return None
    return AxisRange(y_min, y_max)
