from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Optional

from PyQt6 import QtCore, QtGui, QtWidgets

from view_core.affine import Affine2D, Rect
from view_core.config import ViewerConfig
from view_core.engine import TransformEngine

logger = logging.getLogger(__name__)

# Painters are objects with a ``paint`` method or plain callables taking
# (painter, world_to_screen, width, height).
PaintFn = Callable[[QtGui.QPainter, Affine2D, float, float], Any]

ZOOM_STEP = 1.1


class ViewerCanvas(QtWidgets.QWidget):
    """Widget that owns a TransformEngine and paints layers through it.

    Left drag pans, right drag rotates around the press point, the wheel
    zooms around the cursor (Shift: x only, Ctrl: y only).
    """

    def __init__(
        self,
        config: Optional[ViewerConfig] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ):
        super().__init__(parent)
        self.config = config or ViewerConfig()
        self.engine = TransformEngine()
        self.engine.apply_config(self.config)
        self.engine.add_listener(self._on_transform_changed)
        self.antialiasing = True
        self.background = QtGui.QColor(255, 255, 255)
        self._layers: Dict[int, List[Any]] = {}
        self._drag_button: Optional[QtCore.Qt.MouseButton] = None
        self._last_pos = QtCore.QPointF()
        self._rotate_center = QtCore.QPointF()
        self.setMinimumSize(120, 120)
        self.setSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding,
        )

    # ---- painters --------------------------------------------------------
    def add_painter(self, painter: Any, layer: int = 0) -> bool:
        if painter is None:
            return False
        painters = self._layers.setdefault(layer, [])
        if painter in painters:
            return False
        painters.append(painter)
        self.update()
        return True

    def remove_painter(self, painter: Any) -> bool:
        changed = False
        for layer in list(self._layers):
            painters = self._layers[layer]
            if painter in painters:
                painters.remove(painter)
                changed = True
                if not painters:
                    self._layers.pop(layer)
        if changed:
            self.update()
        return changed

    def painters(self) -> List[Any]:
        return [p for layer in sorted(self._layers) for p in self._layers[layer]]

    def set_displayed_world_area(self, rect: Rect) -> None:
        self.engine.set_displayed_world_area(rect)

    def _on_transform_changed(self, _engine: TransformEngine) -> None:
        self.update()

    # ---- Qt events -------------------------------------------------------
    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        size = event.size()
        self.engine.resize(max(0, size.width()), max(0, size.height()))
        super().resizeEvent(event)

    def paintEvent(self, _: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        painter = QtGui.QPainter(self)
        try:
            painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, self.antialiasing)
            painter.setRenderHint(QtGui.QPainter.RenderHint.TextAntialiasing, self.antialiasing)
            painter.fillRect(self.rect(), self.background)
            self.render_layers(painter, float(self.width()), float(self.height()))
        finally:
            painter.end()

    def render_layers(self, painter: QtGui.QPainter, width: float, height: float) -> None:
        # One snapshot per frame; edits made by painters show up next frame.
        world_to_screen = self.engine.get_world_to_screen()
        for layer in self.painters():
            paint: PaintFn = getattr(layer, "paint", layer)
            painter.save()
            try:
                paint(painter, world_to_screen, width, height)
            except Exception:
                # Do not crash the UI for a single layer failure.
                logger.exception("painter %r failed", layer)
            finally:
                painter.restore()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        button = event.button()
        if button in (QtCore.Qt.MouseButton.LeftButton, QtCore.Qt.MouseButton.RightButton):
            self._drag_button = button
            self._last_pos = event.position()
            self._rotate_center = event.position()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if self._drag_button is None:
            super().mouseMoveEvent(event)
            return
        pos = event.position()
        if self._drag_button == QtCore.Qt.MouseButton.LeftButton:
            self.engine.pan(pos.x() - self._last_pos.x(), pos.y() - self._last_pos.y())
        else:
            angle = _angle_between(self._rotate_center, self._last_pos, pos)
            if angle:
                self.engine.rotate(self._rotate_center.x(), self._rotate_center.y(), angle)
        self._last_pos = pos
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if self._drag_button is not None and event.button() == self._drag_button:
            self._drag_button = None
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # type: ignore[override]
        angle = event.angleDelta().y()
        if angle == 0:
            return
        factor = ZOOM_STEP if angle > 0 else 1.0 / ZOOM_STEP
        modifiers = event.modifiers()
        factor_x = factor_y = factor
        if modifiers & QtCore.Qt.KeyboardModifier.ShiftModifier:
            factor_y = 1.0
        elif modifiers & QtCore.Qt.KeyboardModifier.ControlModifier:
            factor_x = 1.0
        pos = event.position()
        self.engine.zoom(pos.x(), pos.y(), factor_x, factor_y)
        event.accept()


def _angle_between(center: QtCore.QPointF, start: QtCore.QPointF, end: QtCore.QPointF) -> float:
    """Signed angle swept from ``start`` to ``end`` around ``center``."""
    a0 = math.atan2(start.y() - center.y(), start.x() - center.x())
    a1 = math.atan2(end.y() - center.y(), end.x() - center.x())
    if start == center or end == center:
        return 0.0
    delta = a1 - a0
    while delta > math.pi:
        delta -= 2.0 * math.pi
    while delta < -math.pi:
        delta += 2.0 * math.pi
    return delta
