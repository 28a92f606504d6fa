from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .errors import DegenerateTransform

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its minimum corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def center(self) -> Point:
        return (self.x + self.width * 0.5, self.y + self.height * 0.5)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
        )

    @staticmethod
    def from_points(points) -> "Rect":
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        min_x, min_y = min(xs), min(ys)
        return Rect(min_x, min_y, max(xs) - min_x, max(ys) - min_y)


@dataclass(frozen=True)
class Affine2D:
    """Immutable 2x3 affine matrix.

    x' = scale_x * x + shear_x * y + translate_x
    y' = shear_y * x + scale_y * y + translate_y

    Composition follows the usual matrix order: ``a @ b`` applies ``b`` first.
    """

    scale_x: float = 1.0
    shear_y: float = 0.0
    shear_x: float = 0.0
    scale_y: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    # ---- constructors ----------------------------------------------------
    @staticmethod
    def identity() -> "Affine2D":
        return Affine2D()

    @staticmethod
    def translation(dx: float, dy: float) -> "Affine2D":
        return Affine2D(translate_x=float(dx), translate_y=float(dy))

    @staticmethod
    def scaling(sx: float, sy: float) -> "Affine2D":
        return Affine2D(scale_x=float(sx), scale_y=float(sy))

    @staticmethod
    def rotation(angle: float) -> "Affine2D":
        c = math.cos(angle)
        s = math.sin(angle)
        return Affine2D(c, s, -s, c, 0.0, 0.0)

    @staticmethod
    def about(x: float, y: float, inner: "Affine2D") -> "Affine2D":
        """Conjugate ``inner`` so that the point (x, y) is its fixed point."""
        return Affine2D.translation(x, y) @ inner @ Affine2D.translation(-x, -y)

    # ---- algebra ---------------------------------------------------------
    def __matmul__(self, other: "Affine2D") -> "Affine2D":
        a = self
        b = other
        return Affine2D(
            scale_x=a.scale_x * b.scale_x + a.shear_x * b.shear_y,
            shear_y=a.shear_y * b.scale_x + a.scale_y * b.shear_y,
            shear_x=a.scale_x * b.shear_x + a.shear_x * b.scale_y,
            scale_y=a.shear_y * b.shear_x + a.scale_y * b.scale_y,
            translate_x=a.scale_x * b.translate_x + a.shear_x * b.translate_y + a.translate_x,
            translate_y=a.shear_y * b.translate_x + a.scale_y * b.translate_y + a.translate_y,
        )

    def then(self, other: "Affine2D") -> "Affine2D":
        """Return the transform that applies ``self`` and then ``other``."""
        return other @ self

    def determinant(self) -> float:
        return self.scale_x * self.scale_y - self.shear_x * self.shear_y

    def is_invertible(self) -> bool:
        det = self.determinant()
        return math.isfinite(det) and det != 0.0 and all(
            math.isfinite(v) for v in self.as_tuple()
        )

    def inverted(self) -> "Affine2D":
        det = self.determinant()
        if not self.is_invertible():
            raise DegenerateTransform(f"Determinant is {det}")
        sx = self.scale_y / det
        shy = -self.shear_y / det
        shx = -self.shear_x / det
        sy = self.scale_x / det
        tx = -(sx * self.translate_x + shx * self.translate_y)
        ty = -(shy * self.translate_x + sy * self.translate_y)
        inverse = Affine2D(sx, shy, shx, sy, tx, ty)
        if not inverse.is_invertible():
            raise DegenerateTransform(f"Inverse of {self} is not finite")
        return inverse

    # ---- mapping ---------------------------------------------------------
    def map_point(self, x: float, y: float) -> Point:
        return (
            self.scale_x * x + self.shear_x * y + self.translate_x,
            self.shear_y * x + self.scale_y * y + self.translate_y,
        )

    def map_vector(self, dx: float, dy: float) -> Point:
        return (
            self.scale_x * dx + self.shear_x * dy,
            self.shear_y * dx + self.scale_y * dy,
        )

    def map_rect(self, rect: Rect) -> Tuple[Point, Point, Point, Point]:
        """Return the four mapped corners of ``rect`` (in corner order)."""
        c0, c1, c2, c3 = rect.corners()
        return (
            self.map_point(*c0),
            self.map_point(*c1),
            self.map_point(*c2),
            self.map_point(*c3),
        )

    def map_bounds(self, rect: Rect) -> Rect:
        return Rect.from_points(self.map_rect(rect))

    def distance_x(self, distance: float) -> float:
        """Length of a world x-distance after mapping."""
        dx, dy = self.map_vector(distance, 0.0)
        return math.hypot(dx, dy)

    def distance_y(self, distance: float) -> float:
        """Length of a world y-distance after mapping."""
        dx, dy = self.map_vector(0.0, distance)
        return math.hypot(dx, dy)

    def as_tuple(self) -> Tuple[float, float, float, float, float, float]:
        return (
            self.scale_x,
            self.shear_y,
            self.shear_x,
            self.scale_y,
            self.translate_x,
            self.translate_y,
        )

    def is_close(self, other: "Affine2D", tol: float = 1e-9) -> bool:
        return all(
            math.isclose(a, b, rel_tol=tol, abs_tol=tol)
            for a, b in zip(self.as_tuple(), other.as_tuple())
        )
