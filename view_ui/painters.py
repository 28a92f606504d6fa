from __future__ import annotations

import math
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from PyQt6 import QtCore, QtGui

from view_core.affine import Affine2D, Rect
from view_core.axes import (
    compute_adjusted_world_tick_distance_x,
    compute_world_tick_distance_x,
    compute_world_tick_distance_y,
    compute_world_ticks,
    format_string_for,
)
from view_core.config import ViewerConfig
from view_core.errors import InvalidArgument
from view_core.labels import LabelPaintState, LabelPlacement, place_label
from view_core.numbers import SampledFunction, interpolate
from view_core.predicates import Predicate

from .qt_bridge import make_text_bounds, text_bounds, to_qpointf, to_qtransform

LabelFormatter = Callable[[float], str]


class LabelPainter:
    """Draws a single text label at a LabelPlacement."""

    def __init__(
        self,
        font: Optional[QtGui.QFont] = None,
        color: Optional[QtGui.QColor] = None,
        placement: Optional[LabelPlacement] = None,
        condition: Optional[Predicate] = None,
    ):
        self.font = font or QtGui.QFont()
        self.color = color if color is not None else QtGui.QColor(40, 44, 52)
        self.placement = placement or LabelPlacement()
        self.condition = condition

    def set_anchor(self, x: float, y: float) -> None:
        self.placement = replace(self.placement, anchor=(x, y))

    def set_location(self, x: float, y: float) -> None:
        self.placement = replace(self.placement, location=(x, y))

    def set_angle(self, angle: float) -> None:
        self.placement = replace(self.placement, angle=angle)

    def set_transforming_labels(self, transforming: bool) -> None:
        self.placement = replace(self.placement, transforming_labels=transforming)

    def paint(
        self,
        painter: QtGui.QPainter,
        world_to_screen: Affine2D,
        width: float,
        height: float,
        text: Optional[str] = None,
    ) -> Optional[LabelPaintState]:
        if text is None:
            return None
        state = place_label(
            text, make_text_bounds(self.font), self.placement, world_to_screen, self.condition
        )
        if state is None:
            return None
        painter.save()
        painter.setFont(self.font)
        painter.setPen(self.color)
        painter.setTransform(to_qtransform(state.label_transform), True)
        painter.drawText(QtCore.QPointF(0.0, 0.0), text)
        painter.restore()
        return state


class CoordinateSystemPainter:
    """Grid, axes, ticks and tick labels for the visible world area."""

    def __init__(self, config: Optional[ViewerConfig] = None):
        config = config or ViewerConfig()
        self.font = QtGui.QFont()
        self.font.setPointSizeF(9.0)
        self.axis_color: Optional[QtGui.QColor] = QtGui.QColor(128, 128, 128)
        self.grid_color: Optional[QtGui.QColor] = QtGui.QColor(240, 240, 240)
        self.tick_size = 5.0
        self.min_screen_tick_distance = config.min_screen_tick_distance
        self.adjust_for_string_lengths = True
        self.world_y_of_x_axis = 0.0
        self.world_x_of_y_axis = 0.0
        self.label_formatter_x: Optional[LabelFormatter] = None
        self.label_formatter_y: Optional[LabelFormatter] = None
        self._fixed_step_x: Optional[float] = None
        self._fixed_step_y: Optional[float] = None
        self.label_painter_x = LabelPainter(
            self.font,
            placement=LabelPlacement(anchor=(0.5, 0.0), transforming_labels=False),
        )
        self.label_painter_y = LabelPainter(
            self.font,
            placement=LabelPlacement(anchor=(1.0, 0.5), transforming_labels=False),
        )

    def set_fixed_world_tick_distance_x(self, step: Optional[float]) -> None:
        self._fixed_step_x = _checked_step(step)

    def set_fixed_world_tick_distance_y(self, step: Optional[float]) -> None:
        self._fixed_step_y = _checked_step(step)

    def compute_ticks(
        self, world_to_screen: Affine2D, bounds: Rect
    ) -> Tuple[List[float], float, List[float], float]:
        """Tick values and steps (x, then y) for the given world bounds."""
        step_x = self._fixed_step_x
        if step_x is None:
            step_x = compute_world_tick_distance_x(world_to_screen, self.min_screen_tick_distance)
            if self.adjust_for_string_lengths:
                step_x = compute_adjusted_world_tick_distance_x(
                    world_to_screen,
                    bounds.min_x,
                    bounds.max_x,
                    step_x,
                    self.min_screen_tick_distance,
                    lambda text: text_bounds(text, self.font).width,
                )
        step_y = self._fixed_step_y
        if step_y is None:
            step_y = compute_world_tick_distance_y(world_to_screen, self.min_screen_tick_distance)
        ticks_x = compute_world_ticks(bounds.min_x, bounds.max_x, step_x)
        ticks_y = compute_world_ticks(bounds.min_y, bounds.max_y, step_y)
        return ticks_x, step_x, ticks_y, step_y

    def paint(
        self, painter: QtGui.QPainter, world_to_screen: Affine2D, width: float, height: float
    ) -> None:
        if width <= 0 or height <= 0:
            return
        screen_to_world = world_to_screen.inverted()
        bounds = screen_to_world.map_bounds(Rect(0.0, 0.0, width, height))
        ticks_x, step_x, ticks_y, step_y = self.compute_ticks(world_to_screen, bounds)

        painter.save()
        pen = QtGui.QPen()
        pen.setWidthF(1.0)
        if self.grid_color is not None:
            pen.setColor(self.grid_color)
            painter.setPen(pen)
            for x in ticks_x:
                _draw_world_line(painter, world_to_screen, (x, bounds.min_y), (x, bounds.max_y))
            for y in ticks_y:
                _draw_world_line(painter, world_to_screen, (bounds.min_x, y), (bounds.max_x, y))
        if self.axis_color is not None:
            pen.setColor(self.axis_color)
            painter.setPen(pen)
            y0 = self.world_y_of_x_axis
            x0 = self.world_x_of_y_axis
            _draw_world_line(painter, world_to_screen, (bounds.min_x, y0), (bounds.max_x, y0))
            _draw_world_line(painter, world_to_screen, (x0, bounds.min_y), (x0, bounds.max_y))
            fmt_x = self.label_formatter_x or format_string_for(step_x).apply
            fmt_y = self.label_formatter_y or format_string_for(step_y).apply
            self.label_painter_x.color = self.axis_color
            self.label_painter_y.color = self.axis_color
            for x in ticks_x:
                self._paint_tick(
                    painter, world_to_screen, screen_to_world, (x, y0), (1.0, 0.0),
                    self.label_painter_x, fmt_x(x), width, height,
                )
            for y in ticks_y:
                self._paint_tick(
                    painter, world_to_screen, screen_to_world, (x0, y), (0.0, 1.0),
                    self.label_painter_y, fmt_y(y), width, height,
                )
        painter.restore()

    def _paint_tick(
        self,
        painter: QtGui.QPainter,
        world_to_screen: Affine2D,
        screen_to_world: Affine2D,
        world_point: Tuple[float, float],
        world_axis: Tuple[float, float],
        label_painter: LabelPainter,
        text: str,
        width: float,
        height: float,
    ) -> None:
        sx, sy = world_to_screen.map_point(*world_point)
        # x ticks point down the screen, y ticks point left.
        ax, ay = world_to_screen.map_vector(*world_axis)
        length = math.hypot(ax, ay)
        nx, ny = -ay / length, ax / length
        if (world_axis[0] != 0.0 and ny < 0.0) or (world_axis[0] == 0.0 and nx > 0.0):
            nx, ny = -nx, -ny
        end = (sx + nx * self.tick_size, sy + ny * self.tick_size)
        painter.drawLine(to_qpointf((sx, sy)), to_qpointf(end))
        label_painter.set_location(*screen_to_world.map_point(*end))
        label_painter.paint(painter, world_to_screen, width, height, text)


class FunctionPainter:
    """Plots y = fn(x) over the visible x range; gaps where fn is undefined."""

    def __init__(self, fn: SampledFunction, color: Optional[QtGui.QColor] = None):
        self.fn = fn
        self.color = color if color is not None else QtGui.QColor(80, 170, 255)
        self.line_width = 1.5

    def build_path(self, world_to_screen: Affine2D, width: float, height: float) -> QtGui.QPainterPath:
        bounds = world_to_screen.inverted().map_bounds(Rect(0.0, 0.0, width, height))
        path = QtGui.QPainterPath()
        drawing = False
        for x in interpolate(bounds.min_x, bounds.max_x, max(2, int(width))):
            y = self.fn(x)
            if y is None or not math.isfinite(y):
                drawing = False
                continue
            point = to_qpointf(world_to_screen.map_point(x, y))
            if drawing:
                path.lineTo(point)
            else:
                path.moveTo(point)
                drawing = True
        return path

    def paint(
        self, painter: QtGui.QPainter, world_to_screen: Affine2D, width: float, height: float
    ) -> None:
        if width <= 0 or height <= 0:
            return
        pen = QtGui.QPen(self.color)
        pen.setWidthF(self.line_width)
        painter.save()
        painter.setPen(pen)
        painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
        painter.drawPath(self.build_path(world_to_screen, width, height))
        painter.restore()


def _checked_step(step: Optional[float]) -> Optional[float]:
    if step is None:
        return None
    if not math.isfinite(step) or step <= 0.0:
        raise InvalidArgument(f"Tick distance must be positive, but is {step}")
    return float(step)


def _draw_world_line(
    painter: QtGui.QPainter,
    world_to_screen: Affine2D,
    start: Tuple[float, float],
    end: Tuple[float, float],
) -> None:
    painter.drawLine(
        to_qpointf(world_to_screen.map_point(*start)),
        to_qpointf(world_to_screen.map_point(*end)),
    )
