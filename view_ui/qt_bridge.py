from __future__ import annotations

from typing import Callable

from PyQt6 import QtCore, QtGui

from view_core.affine import Affine2D, Rect


def to_qtransform(transform: Affine2D) -> QtGui.QTransform:
    return QtGui.QTransform(
        transform.scale_x,
        transform.shear_y,
        transform.shear_x,
        transform.scale_y,
        transform.translate_x,
        transform.translate_y,
    )


def from_qtransform(transform: QtGui.QTransform) -> Affine2D:
    return Affine2D(
        transform.m11(),
        transform.m12(),
        transform.m21(),
        transform.m22(),
        transform.dx(),
        transform.dy(),
    )


def to_qrectf(rect: Rect) -> QtCore.QRectF:
    return QtCore.QRectF(rect.x, rect.y, rect.width, rect.height)


def to_qpointf(point) -> QtCore.QPointF:
    return QtCore.QPointF(point[0], point[1])


def text_bounds(text: str, font: QtGui.QFont) -> Rect:
    """Bounds of ``text`` drawn with its baseline origin at (0, 0)."""
    metrics = QtGui.QFontMetricsF(font)
    return Rect(0.0, -metrics.ascent(), metrics.horizontalAdvance(text), metrics.height())


def make_text_bounds(font: QtGui.QFont) -> Callable[[str], Rect]:
    return lambda text: text_bounds(text, font)
