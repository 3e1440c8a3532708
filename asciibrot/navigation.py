"""Utilities for panning and zooming the Mandelbrot viewport."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional

from .events import ARROW_KEYS, Button, Event, Key, KeyEvent, PointerPress
from .renderer import GridSize, Viewport, grid_to_plane

DEFAULT_PAN_STEP = 0.1
DEFAULT_ZOOM_IN = 0.5
DEFAULT_ZOOM_OUT = 1.5


def pan(viewport: Viewport, direction: Key, step: float = DEFAULT_PAN_STEP) -> Viewport:
    """Shift the viewport origin by ``step`` of its extent; extents are unchanged."""

    if direction is Key.RIGHT:
        return replace(viewport, x_min=viewport.x_min + viewport.width * step)
    if direction is Key.LEFT:
        return replace(viewport, x_min=viewport.x_min - viewport.width * step)
    if direction is Key.DOWN:
        return replace(viewport, y_min=viewport.y_min + viewport.height * step)
    if direction is Key.UP:
        return replace(viewport, y_min=viewport.y_min - viewport.height * step)
    raise ValueError(f"{direction} is not a pan direction.")


def scale_origin(f: float, x: float, x0: float) -> float:
    return x - f * x + f * x0


def scale_bounds(viewport: Viewport, f: float, grid_x: int, grid_y: int, grid: GridSize) -> Viewport:
    """Scale the viewport by ``f`` keeping the plane point under ``(grid_x, grid_y)`` fixed."""

    if not math.isfinite(f) or f <= 0:
        raise ValueError(f"zoom factor must be finite and positive, got {f!r}.")
    anchor = grid_to_plane(grid_x, grid_y, grid, viewport)
    return Viewport(
        x_min=scale_origin(f, anchor.re, viewport.x_min),
        width=f * viewport.width,
        y_min=scale_origin(f, anchor.im, viewport.y_min),
        height=f * viewport.height,
    )


def is_resolvable(viewport: Viewport) -> bool:
    """True while both extents are still distinguishable at the origin's float precision."""

    return (
        viewport.x_min + viewport.width != viewport.x_min
        and viewport.y_min + viewport.height != viewport.y_min
    )


@dataclass(frozen=True)
class Navigator:
    """Translate input events into viewport transforms."""

    pan_step: float = DEFAULT_PAN_STEP
    zoom_in: float = DEFAULT_ZOOM_IN
    zoom_out: float = DEFAULT_ZOOM_OUT

    def __post_init__(self) -> None:
        if not math.isfinite(self.pan_step) or self.pan_step <= 0:
            raise ValueError("pan_step must be finite and positive.")
        for name in ("zoom_in", "zoom_out"):
            factor = getattr(self, name)
            if not math.isfinite(factor) or factor <= 0:
                raise ValueError(f"{name} must be finite and positive.")

    def zoom_factor(self, button: Button) -> float:
        return self.zoom_in if button is Button.PRIMARY else self.zoom_out

    def apply(self, viewport: Viewport, event: Event, grid: GridSize) -> Optional[Viewport]:
        """Return the viewport after ``event``, or ``None`` when the event is ignored."""

        if isinstance(event, KeyEvent):
            if event.key not in ARROW_KEYS:
                return None
            try:
                return pan(viewport, event.key, self.pan_step)
            except ValueError:
                # Origin overflowed to infinity.
                return None

        if isinstance(event, PointerPress):
            if not grid.contains(event.grid_x, event.grid_y):
                return None
            f = self.zoom_factor(event.button)
            try:
                scaled = scale_bounds(viewport, f, event.grid_x, event.grid_y, grid)
            except ValueError:
                # Extent underflowed to zero or overflowed to infinity.
                return None
            if not is_resolvable(scaled):
                return None
            return scaled

        return None
