import math

import pytest

from view_core.affine import Affine2D, Rect
from view_core.errors import InvalidArgument
from view_core.labels import (
    LabelPlacement,
    LabelSizeLimits,
    compute_absolute_anchor,
    compute_label_screen_bounds,
    compute_label_shape,
    compute_label_transform,
    label_width_at_least,
    label_width_at_most,
    place_label,
    transformed_label_width_at_least,
    transformed_label_width_at_most,
)

BOUNDS = Rect(0.0, -8.0, 40.0, 10.0)


def _measure(_text: str) -> Rect:
    return BOUNDS


def _rect_close(a: Rect, b: Rect, tol: float = 1e-9) -> bool:
    return all(
        abs(x - y) <= tol
        for x, y in zip((a.x, a.y, a.width, a.height), (b.x, b.y, b.width, b.height))
    )


def test_absolute_anchor_is_fraction_of_bounds() -> None:
    assert compute_absolute_anchor(BOUNDS, (0.5, 0.5)) == (20.0, -3.0)
    assert compute_absolute_anchor(BOUNDS, (1.0, 0.0)) == (40.0, -8.0)


def test_transforming_label_scales_with_view() -> None:
    placement = LabelPlacement(anchor=(0.5, 0.5), location=(10.0, 20.0))
    world_to_screen = Affine2D.scaling(2.0, 2.0)
    transform = compute_label_transform(BOUNDS, placement, world_to_screen)
    assert transform.map_point(20.0, -3.0) == (20.0, 40.0)
    bounds = compute_label_screen_bounds(BOUNDS, placement, world_to_screen)
    assert _rect_close(bounds, Rect(-20.0, 30.0, 80.0, 20.0))


def test_fixed_label_keeps_pixel_size() -> None:
    placement = LabelPlacement(anchor=(0.5, 0.5), location=(10.0, 20.0), transforming_labels=False)
    world_to_screen = Affine2D.scaling(2.0, 2.0)
    bounds = compute_label_screen_bounds(BOUNDS, placement, world_to_screen)
    assert _rect_close(bounds, Rect(0.0, 35.0, 40.0, 10.0))
    zoomed = compute_label_screen_bounds(BOUNDS, placement, Affine2D.scaling(8.0, 8.0))
    assert abs(zoomed.width - 40.0) < 1e-9
    assert abs(zoomed.height - 10.0) < 1e-9


def test_rotated_label_shape() -> None:
    placement = LabelPlacement(
        anchor=(0.0, 0.0), location=(0.0, 0.0), angle=math.pi / 2, transforming_labels=False
    )
    corners = compute_label_shape(Rect(0.0, 0.0, 10.0, 2.0), placement, Affine2D())
    assert len(corners) == 4
    bounds = Rect.from_points(corners)
    assert _rect_close(bounds, Rect(-2.0, 0.0, 2.0, 10.0))


def test_anchor_point_lands_on_location_for_any_angle() -> None:
    world_to_screen = Affine2D.translation(5.0, 7.0) @ Affine2D.rotation(0.4) @ Affine2D.scaling(3.0, -2.0)
    for angle in (0.0, 0.5, 2.0, -1.3):
        for transforming in (True, False):
            placement = LabelPlacement(
                anchor=(0.25, 0.75), location=(4.0, -1.0), angle=angle, transforming_labels=transforming
            )
            transform = compute_label_transform(BOUNDS, placement, world_to_screen)
            anchor = compute_absolute_anchor(BOUNDS, placement.anchor)
            x, y = transform.map_point(*anchor)
            ex, ey = world_to_screen.map_point(4.0, -1.0)
            assert abs(x - ex) < 1e-9
            assert abs(y - ey) < 1e-9


@pytest.mark.parametrize(
    "kwargs",
    [
        {"anchor": (1.5, 0.0)},
        {"anchor": (0.0, -0.1)},
        {"location": (float("nan"), 0.0)},
        {"angle": float("inf")},
    ],
)
def test_invalid_placements_are_rejected(kwargs) -> None:
    with pytest.raises(InvalidArgument):
        LabelPlacement(**kwargs)


def test_place_label_without_condition() -> None:
    placement = LabelPlacement(location=(1.0, 1.0))
    state = place_label("abc", _measure, placement, Affine2D())
    assert state is not None
    assert state.label == "abc"
    assert state.bounds == BOUNDS
    assert state.world_to_screen == Affine2D()


def test_screen_width_condition_vetoes_label() -> None:
    placement = LabelPlacement()
    world_to_screen = Affine2D.scaling(2.0, 2.0)
    assert place_label("x", _measure, placement, world_to_screen, transformed_label_width_at_least(100.0)) is None
    assert place_label("x", _measure, placement, world_to_screen, transformed_label_width_at_most(100.0)) is not None
    assert place_label("x", _measure, placement, world_to_screen, label_width_at_least(50.0)) is None
    assert place_label("x", _measure, placement, world_to_screen, label_width_at_most(50.0)) is not None


def test_fixed_labels_screen_width_ignores_zoom() -> None:
    placement = LabelPlacement(transforming_labels=False)
    condition = transformed_label_width_at_most(45.0)
    assert place_label("x", _measure, placement, Affine2D.scaling(10.0, 10.0), condition) is not None


def test_combined_conditions_and_descriptions() -> None:
    condition = label_width_at_least(10.0) & ~transformed_label_width_at_least(100.0)
    assert str(condition) == "(labelWidth >= 10.0 && !(transformedLabelWidth >= 100.0))"
    assert place_label("x", _measure, LabelPlacement(), Affine2D(), condition) is not None
    assert place_label("x", _measure, LabelPlacement(), Affine2D.scaling(3.0, 3.0), condition) is None


def test_size_limits_check_heights() -> None:
    state = place_label("x", _measure, LabelPlacement(), Affine2D.scaling(1.0, 3.0))
    assert state is not None
    assert LabelSizeLimits(max_world_height=10.0)(state)
    assert not LabelSizeLimits(max_world_height=9.0)(state)
    assert not LabelSizeLimits(max_screen_height=20.0)(state)
    assert LabelSizeLimits(min_screen_height=30.0).as_predicate("tall")(state)
