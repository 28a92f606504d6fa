"""Placement geometry for rotated, anchored text labels."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .affine import Affine2D, Point, Rect
from .errors import InvalidArgument
from .predicates import Leaf, Predicate, evaluate

TextBounds = Callable[[str], Rect]


@dataclass(frozen=True)
class LabelPlacement:
    """Where and how a label is drawn.

    ``anchor`` is a fraction of the label's own text bounds; that point of the
    text is put at ``location`` (world coordinates) and the text is rotated by
    ``angle`` radians around it.
    """

    anchor: Point = (0.5, 0.5)
    location: Point = (0.0, 0.0)
    angle: float = 0.0
    transforming_labels: bool = True

    def __post_init__(self) -> None:
        ax, ay = self.anchor
        if not (0.0 <= ax <= 1.0 and 0.0 <= ay <= 1.0):
            raise InvalidArgument(f"Label anchor must lie in [0,1]x[0,1], but is {self.anchor}")
        lx, ly = self.location
        if not (math.isfinite(lx) and math.isfinite(ly)):
            raise InvalidArgument(f"Label location must be finite, but is {self.location}")
        if not math.isfinite(self.angle):
            raise InvalidArgument(f"Label angle must be finite, but is {self.angle}")


@dataclass(frozen=True)
class LabelPaintState:
    label: str
    bounds: Rect
    label_transform: Affine2D
    world_to_screen: Affine2D


def compute_absolute_anchor(bounds: Rect, anchor: Point) -> Point:
    return (
        bounds.x + bounds.width * anchor[0],
        bounds.y + bounds.height * anchor[1],
    )


def compute_label_transform(
    bounds: Rect, placement: LabelPlacement, world_to_screen: Affine2D
) -> Affine2D:
    """Transform from text-bounds coordinates to screen coordinates."""
    anchor_x, anchor_y = compute_absolute_anchor(bounds, placement.anchor)
    local = Affine2D.rotation(placement.angle) @ Affine2D.translation(-anchor_x, -anchor_y)
    if placement.transforming_labels:
        location = Affine2D.translation(*placement.location)
        return world_to_screen @ location @ local
    screen_x, screen_y = world_to_screen.map_point(*placement.location)
    return Affine2D.translation(screen_x, screen_y) @ local


def compute_label_shape(
    bounds: Rect, placement: LabelPlacement, world_to_screen: Affine2D
) -> Tuple[Point, Point, Point, Point]:
    """The four screen corners of the placed label."""
    return compute_label_transform(bounds, placement, world_to_screen).map_rect(bounds)


def compute_label_screen_bounds(
    bounds: Rect, placement: LabelPlacement, world_to_screen: Affine2D
) -> Rect:
    return Rect.from_points(compute_label_shape(bounds, placement, world_to_screen))


def place_label(
    text: str,
    measure: TextBounds,
    placement: LabelPlacement,
    world_to_screen: Affine2D,
    condition: Optional[Predicate] = None,
) -> Optional[LabelPaintState]:
    """Measure and place ``text``; None if ``condition`` vetoes it."""
    bounds = measure(text)
    state = LabelPaintState(
        label=text,
        bounds=bounds,
        label_transform=compute_label_transform(bounds, placement, world_to_screen),
        world_to_screen=world_to_screen,
    )
    if condition is not None and not evaluate(condition, state):
        return None
    return state


# ---- painting conditions -------------------------------------------------
@dataclass(frozen=True)
class LabelSizeLimits:
    """Accepts labels whose unscaled ("world") and screen sizes are in range."""

    min_world_width: float = -math.inf
    max_world_width: float = math.inf
    min_world_height: float = -math.inf
    max_world_height: float = math.inf
    min_screen_width: float = -math.inf
    max_screen_width: float = math.inf
    min_screen_height: float = -math.inf
    max_screen_height: float = math.inf

    def __call__(self, state: LabelPaintState) -> bool:
        world_width = state.bounds.width
        world_height = state.bounds.height
        if not self.min_world_width <= world_width <= self.max_world_width:
            return False
        if not self.min_world_height <= world_height <= self.max_world_height:
            return False
        screen_width = state.label_transform.distance_x(world_width)
        if not self.min_screen_width <= screen_width <= self.max_screen_width:
            return False
        screen_height = state.label_transform.distance_y(world_height)
        return self.min_screen_height <= screen_height <= self.max_screen_height

    def as_predicate(self, description: str = "labelSizeLimits") -> Leaf:
        return Leaf(self, description)


def label_width_at_least(minimum: float) -> Leaf:
    return Leaf(LabelSizeLimits(min_world_width=minimum), f"labelWidth >= {minimum}")


def label_width_at_most(maximum: float) -> Leaf:
    return Leaf(LabelSizeLimits(max_world_width=maximum), f"labelWidth <= {maximum}")


def transformed_label_width_at_least(minimum: float) -> Leaf:
    return Leaf(
        LabelSizeLimits(min_screen_width=minimum), f"transformedLabelWidth >= {minimum}"
    )


def transformed_label_width_at_most(maximum: float) -> Leaf:
    return Leaf(
        LabelSizeLimits(max_screen_width=maximum), f"transformedLabelWidth <= {maximum}"
    )
