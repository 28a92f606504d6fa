"""Nice-number tick planning for coordinate axes.

Tick steps are members of the sequence ``{1, 2, 5} x 10^n``. The display
format is chosen from the magnitude of the step so that every multiple of the
step renders without trailing noise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from .affine import Affine2D
from .errors import InvalidArgument

NICE_MULTIPLIERS = (1.0, 2.0, 5.0)
SNAP_EPSILON = 1e-9

# Exponent band (of the step magnitude) rendered as fixed-point. Steps
# outside the band render in scientific notation.
FIXED_MIN_EXPONENT = -3
FIXED_MAX_EXPONENT = 9
SCIENTIFIC_DIGITS = 6

DEFAULT_TARGET_TICK_COUNT = 10
MAX_TICK_COUNT = 10000

# Label widths are padded by this factor before comparing against the tick
# distance.
LABEL_WIDTH_PADDING = 1.05

FORMAT_FIXED = "fixed"
FORMAT_SCIENTIFIC = "scientific"
FORMAT_LITERAL = "literal"

_RATIO_TOLERANCE = 1e-9


# ---- decade helpers ------------------------------------------------------
def _nice(multiplier: float, exponent: int) -> float:
    # Parsed from text so the result is correctly rounded over the whole float
    # range: subnormals stay exact, out-of-range decades give 0.0 or inf.
    return float("%ge%d" % (multiplier, exponent))


def _power_of_ten(exponent: int) -> float:
    return _nice(1.0, exponent)


def decimal_exponent(value: float) -> int:
    """floor(log10(value)) for finite value > 0, corrected for round-off."""
    exponent = int(math.floor(math.log10(value)))
    if _power_of_ten(exponent + 1) <= value:
        exponent += 1
    elif _power_of_ten(exponent) > value:
        exponent -= 1
    return exponent


def _candidates(value: float) -> List[float]:
    """Finite nonzero nice numbers around ``value``, ascending."""
    exponent = decimal_exponent(value)
    result = [
        _nice(m, e)
        for e in (exponent - 1, exponent, exponent + 1)
        for m in NICE_MULTIPLIERS
    ]
    result.append(_nice(1.0, exponent + 2))
    return [c for c in result if 0.0 < c < math.inf]


def _require_snappable(value: float) -> None:
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidArgument(f"Only finite positive values can be snapped, got {value}")


def compute_snapped_up_value(value: float) -> float:
    """Return the smallest nice number that is >= value.

    Raises InvalidArgument when no finite nice number is that large (values
    above 1e308).
    """
    _require_snappable(value)
    for candidate in _candidates(value):
        if candidate * (1.0 + SNAP_EPSILON) >= value:
            return candidate
    raise InvalidArgument(f"No finite nice number is >= {value}")


def compute_snapped_down_value(value: float) -> float:
    """Return the largest nice number that is <= value."""
    _require_snappable(value)
    best = None
    for candidate in _candidates(value):
        if candidate <= value * (1.0 + SNAP_EPSILON):
            best = candidate
    if best is None:  # pragma: no cover
        raise AssertionError(f"no nice number below {value}")
    return best


def is_nice_number(value: float) -> bool:
    if not math.isfinite(value) or value <= 0.0:
        return False
    snapped = compute_snapped_down_value(value)
    return math.isclose(snapped, value, rel_tol=SNAP_EPSILON)


# ---- formatting ----------------------------------------------------------
@dataclass(frozen=True)
class TickFormat:
    kind: str
    digits: int = 0

    @property
    def pattern(self) -> str:
        if self.kind == FORMAT_FIXED:
            return "{:.%df}" % self.digits
        if self.kind == FORMAT_SCIENTIFIC:
            return "{:.%de}" % max(0, self.digits - 1)
        return "{}"

    def apply(self, value: float) -> str:
        return format_value(value, self)


def format_string_for(value: float) -> TickFormat:
    """Choose a display format for values of the magnitude of ``value``."""
    if not math.isfinite(value):
        return TickFormat(FORMAT_LITERAL)
    magnitude = abs(value)
    exponent = 0 if magnitude == 0.0 else decimal_exponent(magnitude)
    if FIXED_MIN_EXPONENT <= exponent <= FIXED_MAX_EXPONENT:
        return TickFormat(FORMAT_FIXED, max(0, -exponent))
    return TickFormat(FORMAT_SCIENTIFIC, SCIENTIFIC_DIGITS)


def format_value(value: float, fmt: TickFormat) -> str:
    """Format ``value``; never raises. Non-finite values become markers."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Inf" if value > 0 else "-Inf"
    if fmt.kind == FORMAT_LITERAL:
        return repr(float(value))
    text = fmt.pattern.format(value + 0.0)
    if fmt.kind == FORMAT_SCIENTIFIC:
        mantissa, _, exponent = text.partition("e")
        if "." in mantissa:
            mantissa = mantissa.rstrip("0").rstrip(".")
        text = mantissa + "e" + exponent
    if text.startswith("-") and float(text) == 0.0:
        text = text[1:]
    return text


# ---- ticks ---------------------------------------------------------------
def _floor_ratio(value: float, step: float) -> int:
    q = value / step
    nearest = round(q)
    if abs(q - nearest) <= _RATIO_TOLERANCE * max(1.0, abs(q)):
        return int(nearest)
    return int(math.floor(q))


def _ceil_ratio(value: float, step: float) -> int:
    q = value / step
    nearest = round(q)
    if abs(q - nearest) <= _RATIO_TOLERANCE * max(1.0, abs(q)):
        return int(nearest)
    return int(math.ceil(q))


def compute_world_ticks(world_min: float, world_max: float, step: float) -> List[float]:
    """Multiples of ``step`` inside [world_min, world_max]."""
    if not math.isfinite(step) or step <= 0.0:
        raise InvalidArgument(f"Tick distance must be positive, but is {step}")
    if not (math.isfinite(world_min) and math.isfinite(world_max)):
        raise InvalidArgument(f"Tick range must be finite: [{world_min}, {world_max}]")
    if world_max < world_min:
        return []
    n_min = _ceil_ratio(world_min, step)
    n_max = _floor_ratio(world_max, step)
    count = n_max - n_min + 1
    if count > MAX_TICK_COUNT:
        raise InvalidArgument(
            f"{count} ticks of {step} in [{world_min}, {world_max}] exceed {MAX_TICK_COUNT}"
        )
    return [i * step for i in range(n_min, n_max + 1)]


def compute_world_tick_distance_x(world_to_screen: Affine2D, min_screen_distance: float) -> float:
    """Nice world x-step whose screen length is at least ``min_screen_distance``."""
    unit = world_to_screen.distance_x(1.0)
    return compute_snapped_up_value(min_screen_distance / unit)


def compute_world_tick_distance_y(world_to_screen: Affine2D, min_screen_distance: float) -> float:
    unit = world_to_screen.distance_y(1.0)
    return compute_snapped_up_value(min_screen_distance / unit)


def compute_adjusted_world_tick_distance_x(
    world_to_screen: Affine2D,
    world_min: float,
    world_max: float,
    step: float,
    min_screen_distance: float,
    text_width: Callable[[str], float],
) -> float:
    """Widen ``step`` so that the labels at both range ends fit between ticks."""
    fmt = format_string_for(step)
    n_min = int(world_min / step)
    n_max = int(world_max / step) + 1
    widths = (
        text_width(fmt.apply(n_min * step)),
        text_width(fmt.apply(n_max * step)),
    )
    label_width = max(widths) * LABEL_WIDTH_PADDING
    if label_width > min_screen_distance:
        return compute_world_tick_distance_x(world_to_screen, label_width)
    return step


# ---- plans ---------------------------------------------------------------
@dataclass(frozen=True)
class AxisRange:
    min: float
    max: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise InvalidArgument(f"Axis range must be finite: [{self.min}, {self.max}]")
        if self.min > self.max:
            raise InvalidArgument(f"Axis range is inverted: [{self.min}, {self.max}]")

    @property
    def span(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class TickPlan:
    step: float
    snapped_min: float
    snapped_max: float
    format: TickFormat

    def ticks(self) -> List[float]:
        return compute_world_ticks(self.snapped_min, self.snapped_max, self.step)

    def label(self, value: float) -> str:
        return self.format.apply(value)


def plan_ticks(
    axis_range: AxisRange,
    target_tick_count: int = DEFAULT_TARGET_TICK_COUNT,
    min_step: Optional[float] = None,
) -> TickPlan:
    """Choose a nice step for ``axis_range`` and round the range out to it."""
    if target_tick_count < 1:
        raise InvalidArgument(f"Tick count must be at least 1, but is {target_tick_count}")
    if axis_range.span > 0.0:
        raw = axis_range.span / target_tick_count
    else:
        raw = abs(axis_range.min) or 1.0
    if min_step is not None:
        if not math.isfinite(min_step) or min_step <= 0.0:
            raise InvalidArgument(f"Minimum step must be positive, but is {min_step}")
        raw = max(raw, min_step)
    step = compute_snapped_up_value(raw)
    return TickPlan(
        step=step,
        snapped_min=_floor_ratio(axis_range.min, step) * step,
        snapped_max=_ceil_ratio(axis_range.max, step) * step,
        format=format_string_for(step),
    )
