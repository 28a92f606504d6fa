# =============================================================================
# NAV INDEX (search these tags)
# [NAV-00] Imports / validation helpers
# [NAV-10] Viewport state
# [NAV-20] TransformEngine: accessors + listeners
# [NAV-30] TransformEngine: interactive edits (pan/zoom/rotate)
# [NAV-40] TransformEngine: viewport policy (resize/fit/reset/flip)
# [NAV-99] End
# =============================================================================

# === [NAV-00] Imports / validation helpers ===================================
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from .affine import Affine2D, Point, Rect
from .config import ViewerConfig
from .errors import DegenerateTransform, InvalidArgument

logger = logging.getLogger(__name__)

Listener = Callable[["TransformEngine"], None]

_FLIP_Y = Affine2D.scaling(1.0, -1.0)


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidArgument(f"{name} must be finite, but is {value}")


def _require_positive(**values: float) -> None:
    _require_finite(**values)
    for name, value in values.items():
        if value <= 0.0:
            raise InvalidArgument(f"{name} must be positive, but is {value}")


# === [NAV-10] Viewport state =================================================
@dataclass
class ViewportState:
    width: float = 0.0
    height: float = 0.0
    flipped_vertically: bool = False
    maintain_aspect_ratio: bool = True
    resizing_contents: bool = False

    def has_area(self) -> bool:
        return self.width > 0.0 and self.height > 0.0


# === [NAV-20] TransformEngine: accessors + listeners ========================
class TransformEngine:
    """Owns the world->screen transform of one viewport.

    The transform is an immutable ``Affine2D``; all edits go through the
    methods below, which validate their arguments first and leave the
    transform untouched when they raise. Instances are meant to be used from
    a single (UI) thread.
    """

    def __init__(
        self,
        width: float = 0.0,
        height: float = 0.0,
        *,
        flipped_vertically: bool = False,
        maintain_aspect_ratio: bool = True,
        resizing_contents: bool = False,
    ) -> None:
        _require_finite(width=width, height=height)
        if width < 0 or height < 0:
            raise InvalidArgument(f"Viewport size must not be negative: {width}x{height}")
        self._state = ViewportState(
            width=float(width),
            height=float(height),
            flipped_vertically=flipped_vertically,
            maintain_aspect_ratio=maintain_aspect_ratio,
            resizing_contents=resizing_contents,
        )
        self._transform = _FLIP_Y if flipped_vertically else Affine2D.identity()
        self._inverse: Optional[Affine2D] = None
        self._pending_area: Optional[Tuple[Rect, bool]] = None
        # Last size with area; policy steps after an empty viewport scale from it.
        self._last_area_size: Optional[Tuple[float, float]] = (
            (self._state.width, self._state.height) if self._state.has_area() else None
        )
        self._listeners: List[Listener] = []

    @property
    def state(self) -> ViewportState:
        return replace(self._state)

    @property
    def width(self) -> float:
        return self._state.width

    @property
    def height(self) -> float:
        return self._state.height

    @property
    def flipped_vertically(self) -> bool:
        return self._state.flipped_vertically

    @property
    def maintain_aspect_ratio(self) -> bool:
        return self._state.maintain_aspect_ratio

    @property
    def resizing_contents(self) -> bool:
        return self._state.resizing_contents

    def get_world_to_screen(self) -> Affine2D:
        return self._transform

    def get_screen_to_world(self) -> Affine2D:
        if self._inverse is None:
            self._inverse = self._transform.inverted()
        return self._inverse

    def world_to_screen_point(self, x: float, y: float) -> Point:
        return self._transform.map_point(x, y)

    def screen_to_world_point(self, x: float, y: float) -> Point:
        return self.get_screen_to_world().map_point(x, y)

    def visible_world_bounds(self) -> Rect:
        """Axis-aligned world bounds of the viewport rectangle."""
        screen = Rect(0.0, 0.0, self._state.width, self._state.height)
        return self.get_screen_to_world().map_bounds(screen)

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as exc:
                logger.error("transform listener %r failed: %s", listener, exc)

    def _commit(self, transform: Affine2D, reason: str) -> None:
        if not transform.is_invertible():
            raise DegenerateTransform(
                f"{reason} would produce a non-invertible transform {transform}"
            )
        self._transform = transform
        self._inverse = None
        logger.debug("transform %s -> %s", reason, transform.as_tuple())
        self._notify()

    def set_transform(self, transform: Affine2D) -> None:
        self._commit(transform, "set")

    # === [NAV-30] TransformEngine: interactive edits =========================
    def pan(self, dx: float, dy: float) -> None:
        """Move the view by a screen-space offset."""
        _require_finite(dx=dx, dy=dy)
        self._commit(Affine2D.translation(dx, dy) @ self._transform, "pan")

    def zoom(self, x: float, y: float, factor_x: float, factor_y: float) -> None:
        """Scale around the screen point (x, y), which stays fixed."""
        _require_finite(x=x, y=y)
        _require_positive(factor_x=factor_x, factor_y=factor_y)
        step = Affine2D.about(x, y, Affine2D.scaling(factor_x, factor_y))
        self._commit(step @ self._transform, "zoom")

    def rotate(self, x: float, y: float, angle: float) -> None:
        """Rotate by ``angle`` radians around the screen point (x, y)."""
        _require_finite(x=x, y=y, angle=angle)
        step = Affine2D.about(x, y, Affine2D.rotation(angle))
        self._commit(step @ self._transform, "rotate")

    # === [NAV-40] TransformEngine: viewport policy ===========================
    def set_maintain_aspect_ratio(self, maintain: bool) -> None:
        self._state.maintain_aspect_ratio = bool(maintain)

    def set_resizing_contents(self, resizing: bool) -> None:
        self._state.resizing_contents = bool(resizing)

    def set_flipped_vertically(self, flipped: bool) -> None:
        flipped = bool(flipped)
        if flipped == self._state.flipped_vertically:
            return
        self._commit(self._transform @ _FLIP_Y, "flip")
        self._state.flipped_vertically = flipped

    def apply_config(self, cfg: ViewerConfig) -> None:
        self.set_maintain_aspect_ratio(cfg.maintain_aspect_ratio)
        self.set_resizing_contents(cfg.resizing_contents)
        self.set_flipped_vertically(cfg.flipped_vertically)

    def reset_transform(self) -> None:
        base = _FLIP_Y if self._state.flipped_vertically else Affine2D.identity()
        self._commit(base, "reset")

    def resize(self, width: float, height: float) -> None:
        """Record a new viewport size and adapt the transform to the policy."""
        _require_finite(width=width, height=height)
        if width < 0 or height < 0:
            raise InvalidArgument(f"Viewport size must not be negative: {width}x{height}")
        new_w, new_h = float(width), float(height)
        self._state.width = new_w
        self._state.height = new_h
        if not self._state.has_area():
            logger.debug("resize to empty viewport %sx%s deferred", new_w, new_h)
            self._notify()
            return
        previous = self._last_area_size
        self._last_area_size = (new_w, new_h)
        if self._pending_area is not None:
            area, maintain = self._pending_area
            self._pending_area = None
            self._fit(area, maintain)
            return
        if previous is None or previous == (new_w, new_h):
            self._notify()
            return
        old_w, old_h = previous

        if self._state.maintain_aspect_ratio:
            s = min(new_w / old_w, new_h / old_h)
            step = (
                Affine2D.translation(new_w * 0.5, new_h * 0.5)
                @ Affine2D.scaling(s, s)
                @ Affine2D.translation(-old_w * 0.5, -old_h * 0.5)
            )
            self._commit(step @ self._transform, "resize")
        elif self._state.resizing_contents:
            step = Affine2D.scaling(new_w / old_w, new_h / old_h)
            self._commit(step @ self._transform, "resize")
        else:
            self._notify()

    def set_displayed_world_area(self, rect: Rect) -> None:
        """Show ``rect`` (world coordinates) in the whole viewport.

        While the viewport has no area the request is kept and applied on the
        first resize to a non-empty size.
        """
        _require_finite(x=rect.x, y=rect.y)
        _require_positive(width=rect.width, height=rect.height)
        if not self._state.has_area():
            self._pending_area = (rect, self._state.maintain_aspect_ratio)
            return
        self._pending_area = None
        self._fit(rect, self._state.maintain_aspect_ratio)

    def _fit(self, rect: Rect, maintain: bool) -> None:
        w, h = self._state.width, self._state.height
        sx = w / rect.width
        sy = h / rect.height
        if maintain:
            sx = sy = min(sx, sy)
        if self._state.flipped_vertically:
            sy = -sy
        cx, cy = rect.center()
        transform = (
            Affine2D.translation(w * 0.5, h * 0.5)
            @ Affine2D.scaling(sx, sy)
            @ Affine2D.translation(-cx, -cy)
        )
        self._commit(transform, "fit")


# === [NAV-99] End ============================================================
