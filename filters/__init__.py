# filters/__init__.py
"""Frame filters: lifecycle base class, drawing canvas, PNG snapshots, and the sample filter."""

from .base import FilterState, FrameFilter
from .canvas import Canvas, LineCap, LineJoin, Rect, RenderingHints, Stroke, open_canvas
from .errors import EncodingError, FilterError, InitializationError
from .sample import SampleFilter, SampleFilterConfig
from .snapshot import SnapshotResult, save_png

__all__ = [
    "FrameFilter",
    "FilterState",
    "Canvas",
    "open_canvas",
    "Rect",
    "Stroke",
    "LineCap",
    "LineJoin",
    "RenderingHints",
    "FilterError",
    "InitializationError",
    "EncodingError",
    "SampleFilter",
    "SampleFilterConfig",
    "SnapshotResult",
    "save_png",
]

__version__ = "0.1.0"
