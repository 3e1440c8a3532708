"""Public API for the terminal Mandelbrot explorer."""

from .arithmetic import Complex, add, multiply, squared_magnitude
from .errors import DisplayError, InputError, StartupError, ViewerError
from .events import Button, Key, KeyEvent, PointerPress
from .navigation import Navigator, pan, scale_bounds, scale_origin
from .renderer import (
    DEFAULT_VIEWPORT,
    ENGINES,
    SHADES,
    EscapeParameters,
    GridSize,
    Viewport,
    check_convergence,
    escape_counts,
    frame_rows,
    grid_to_plane,
    render_frame,
    shade,
)
from .viewer import InteractiveViewer

__all__ = [
    "Button",
    "Complex",
    "DEFAULT_VIEWPORT",
    "DisplayError",
    "ENGINES",
    "EscapeParameters",
    "GridSize",
    "InputError",
    "InteractiveViewer",
    "Key",
    "KeyEvent",
    "Navigator",
    "PointerPress",
    "SHADES",
    "StartupError",
    "ViewerError",
    "Viewport",
    "add",
    "check_convergence",
    "escape_counts",
    "frame_rows",
    "grid_to_plane",
    "multiply",
    "pan",
    "render_frame",
    "scale_bounds",
    "scale_origin",
    "shade",
    "squared_magnitude",
]
