from __future__ import annotations

import argparse
import math
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from PyQt6 import QtWidgets

from diagnostics.logging_setup import configure_logging, get_logger
from view_core.affine import Rect
from view_core.config import load_config
from view_core.numbers import estimate_value_range

from .canvas import ViewerCanvas
from .painters import CoordinateSystemPainter, FunctionPainter


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pan/zoom/rotate viewer demo")
    parser.add_argument("--config", type=Path, default=None, help="viewer config JSON")
    parser.add_argument("--flip", action="store_true", help="y axis pointing up")
    parser.add_argument("--x-min", type=float, default=-10.0)
    parser.add_argument("--x-max", type=float, default=10.0)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    configure_logging()
    config = load_config(args.config)
    if args.flip:
        config = replace(config, flipped_vertically=True)
    get_logger().info("viewer demo starting config=%s", config)

    app = QtWidgets.QApplication(sys.argv[:1])
    canvas = ViewerCanvas(config)
    canvas.add_painter(CoordinateSystemPainter(config), layer=0)
    canvas.add_painter(FunctionPainter(math.sin), layer=1)

    y_range = estimate_value_range(math.sin, args.x_min, args.x_max)
    y_min, y_max = (y_range.min, y_range.max) if y_range else (-1.0, 1.0)
    margin = max(0.5, (y_max - y_min) * 0.1)
    canvas.set_displayed_world_area(
        Rect(args.x_min, y_min - margin, args.x_max - args.x_min, y_max - y_min + 2 * margin)
    )
    canvas.setWindowTitle("planeview")
    canvas.resize(800, 600)
    canvas.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
