"""World/screen view transforms, axis tick planning and label geometry."""

from .affine import Affine2D, Rect
from .axes import (
    AxisRange,
    TickFormat,
    TickPlan,
    compute_snapped_down_value,
    compute_snapped_up_value,
    compute_world_ticks,
    format_string_for,
    format_value,
    plan_ticks,
)
from .config import ViewerConfig, load_config, save_config
from .engine import TransformEngine, ViewportState
from .errors import DegenerateTransform, InvalidArgument, ViewError
from .labels import LabelPaintState, LabelPlacement, compute_label_shape, place_label
from .predicates import And, Leaf, Not, Or, describe, evaluate

__all__ = [
    "Affine2D",
    "And",
    "AxisRange",
    "DegenerateTransform",
    "InvalidArgument",
    "LabelPaintState",
    "LabelPlacement",
    "Leaf",
    "Not",
    "Or",
    "Rect",
    "TickFormat",
    "TickPlan",
    "TransformEngine",
    "ViewError",
    "ViewerConfig",
    "ViewportState",
    "compute_label_shape",
    "compute_snapped_down_value",
    "compute_snapped_up_value",
    "compute_world_ticks",
    "describe",
    "evaluate",
    "format_string_for",
    "format_value",
    "load_config",
    "place_label",
    "plan_ticks",
    "save_config",
]
