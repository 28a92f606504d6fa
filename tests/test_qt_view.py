import math

import pytest
from PyQt6 import QtCore, QtGui

from view_core.affine import Affine2D, Rect
from view_core.config import ViewerConfig
from view_core.errors import InvalidArgument
from view_core.labels import LabelPlacement, transformed_label_width_at_least
from view_ui.canvas import ZOOM_STEP, ViewerCanvas
from view_ui.painters import CoordinateSystemPainter, FunctionPainter, LabelPainter
from view_ui.qt_bridge import from_qtransform, text_bounds, to_qtransform


def _image(width: int = 200, height: int = 100) -> QtGui.QImage:
    image = QtGui.QImage(width, height, QtGui.QImage.Format.Format_ARGB32)
    image.fill(QtGui.QColor(255, 255, 255))
    return image


def _resize(canvas: ViewerCanvas, width: int, height: int) -> None:
    canvas.resizeEvent(QtGui.QResizeEvent(QtCore.QSize(width, height), QtCore.QSize(0, 0)))


def test_qtransform_round_trip() -> None:
    t = Affine2D(1.5, 0.25, -0.75, 2.0, 13.0, -4.0)
    q = to_qtransform(t)
    mapped = q.map(QtCore.QPointF(3.0, -8.0))
    x, y = t.map_point(3.0, -8.0)
    assert abs(mapped.x() - x) < 1e-9
    assert abs(mapped.y() - y) < 1e-9
    assert from_qtransform(q) == t


def test_text_bounds_start_at_baseline(qapp) -> None:
    font = QtGui.QFont()
    bounds = text_bounds("1000", font)
    assert bounds.x == 0.0
    assert bounds.y < 0.0
    assert bounds.width > text_bounds("1", font).width
    assert bounds.height > 0.0


def test_canvas_resize_feeds_engine_and_applies_pending_area(qapp) -> None:
    canvas = ViewerCanvas(ViewerConfig(maintain_aspect_ratio=False))
    canvas.set_displayed_world_area(Rect(0.0, 0.0, 4.0, 2.0))
    _resize(canvas, 400, 100)
    assert (canvas.engine.width, canvas.engine.height) == (400.0, 100.0)
    x, y = canvas.engine.world_to_screen_point(4.0, 2.0)
    assert abs(x - 400.0) < 1e-9
    assert abs(y - 100.0) < 1e-9


def test_render_layers_passes_snapshot_and_survives_failures(qapp) -> None:
    canvas = ViewerCanvas()
    _resize(canvas, 200, 100)
    canvas.engine.zoom(0, 0, 2.0, 2.0)
    seen = []

    def failing(_painter, _w2s, _w, _h) -> None:
        raise RuntimeError("boom")

    def recording(_painter, w2s, w, h) -> None:
        seen.append((w2s, w, h))

    assert canvas.add_painter(failing, layer=0)
    assert canvas.add_painter(recording, layer=1)
    assert not canvas.add_painter(recording, layer=1)
    assert canvas.add_painter(CoordinateSystemPainter(), layer=2)
    assert canvas.add_painter(FunctionPainter(math.sin), layer=3)

    image = _image()
    painter = QtGui.QPainter(image)
    try:
        canvas.render_layers(painter, 200.0, 100.0)
    finally:
        painter.end()
    assert seen == [(canvas.engine.get_world_to_screen(), 200.0, 100.0)]
    assert canvas.remove_painter(failing)
    assert not canvas.remove_painter(failing)
    assert len(canvas.painters()) == 3


def test_left_drag_pans(qapp) -> None:
    canvas = ViewerCanvas()
    _resize(canvas, 200, 100)
    left = QtCore.Qt.MouseButton.LeftButton
    no_mod = QtCore.Qt.KeyboardModifier.NoModifier

    def event(kind, x, y, buttons):
        return QtGui.QMouseEvent(kind, QtCore.QPointF(x, y), QtCore.QPointF(x, y), left, buttons, no_mod)

    canvas.mousePressEvent(event(QtCore.QEvent.Type.MouseButtonPress, 10, 10, left))
    canvas.mouseMoveEvent(event(QtCore.QEvent.Type.MouseMove, 25, 5, left))
    canvas.mouseReleaseEvent(
        event(QtCore.QEvent.Type.MouseButtonRelease, 25, 5, QtCore.Qt.MouseButton.NoButton)
    )
    assert canvas.engine.get_world_to_screen() == Affine2D.translation(15.0, -5.0)


def test_wheel_zooms_around_cursor(qapp) -> None:
    canvas = ViewerCanvas()
    _resize(canvas, 200, 100)
    event = QtGui.QWheelEvent(
        QtCore.QPointF(50.0, 40.0),
        QtCore.QPointF(50.0, 40.0),
        QtCore.QPoint(0, 0),
        QtCore.QPoint(0, 120),
        QtCore.Qt.MouseButton.NoButton,
        QtCore.Qt.KeyboardModifier.NoModifier,
        QtCore.Qt.ScrollPhase.NoScrollPhase,
        False,
    )
    canvas.wheelEvent(event)
    t = canvas.engine.get_world_to_screen()
    assert abs(t.scale_x - ZOOM_STEP) < 1e-12
    x, y = t.map_point(50.0, 40.0)
    assert abs(x - 50.0) < 1e-9
    assert abs(y - 40.0) < 1e-9


def test_label_painter_respects_condition(qapp) -> None:
    label_painter = LabelPainter(placement=LabelPlacement(location=(50.0, 50.0)))
    image = _image()
    painter = QtGui.QPainter(image)
    try:
        state = label_painter.paint(painter, Affine2D(), 200.0, 100.0, "label")
        assert state is not None
        assert state.label == "label"
        assert label_painter.paint(painter, Affine2D(), 200.0, 100.0, None) is None
        label_painter.condition = transformed_label_width_at_least(1e6)
        assert label_painter.paint(painter, Affine2D(), 200.0, 100.0, "label") is None
    finally:
        painter.end()
    label_painter.set_anchor(0.0, 1.0)
    label_painter.set_angle(0.5)
    assert label_painter.placement.anchor == (0.0, 1.0)
    with pytest.raises(InvalidArgument):
        label_painter.set_anchor(2.0, 0.0)


def test_coordinate_system_ticks(qapp) -> None:
    axes = CoordinateSystemPainter()
    axes.adjust_for_string_lengths = False
    ticks_x, step_x, ticks_y, step_y = axes.compute_ticks(Affine2D(), Rect(0.0, 0.0, 200.0, 100.0))
    assert step_x == 20.0
    assert step_y == 20.0
    assert ticks_x[0] == 0.0 and ticks_x[-1] == 200.0
    assert len(ticks_y) == 6
    axes.set_fixed_world_tick_distance_x(50.0)
    ticks_x, step_x, _, _ = axes.compute_ticks(Affine2D(), Rect(0.0, 0.0, 200.0, 100.0))
    assert ticks_x == [0.0, 50.0, 100.0, 150.0, 200.0]
    with pytest.raises(InvalidArgument):
        axes.set_fixed_world_tick_distance_y(0.0)


def test_function_painter_breaks_path_at_gaps(qapp) -> None:
    painter = FunctionPainter(lambda x: None if 40.0 < x < 60.0 else 1.0)
    path = painter.build_path(Affine2D(), 100.0, 100.0)
    moves = [
        i for i in range(path.elementCount())
        if path.elementAt(i).type == QtGui.QPainterPath.ElementType.MoveToElement
    ]
    assert len(moves) == 2
