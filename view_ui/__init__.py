from .canvas import ViewerCanvas
from .painters import CoordinateSystemPainter, FunctionPainter, LabelPainter
from .qt_bridge import from_qtransform, text_bounds, to_qtransform

__all__ = [
    "CoordinateSystemPainter",
    "FunctionPainter",
    "LabelPainter",
    "ViewerCanvas",
    "from_qtransform",
    "text_bounds",
    "to_qtransform",
]
