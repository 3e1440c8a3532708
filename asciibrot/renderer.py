"""Rendering primitives for ASCII Mandelbrot frames."""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .arithmetic import Complex

DEFAULT_MAX_ITERATIONS = 900
DEFAULT_ESCAPE_THRESHOLD_SQ = 10.0

# Escape count stored for cells that never leave the threshold.
BOUNDED = -1

# One symbol per band of 100 iterations, then the symbol for bounded points.
PALETTE = " .:-=+*#%"
BOUNDED_SYMBOL = "@"
SHADES = PALETTE + BOUNDED_SYMBOL

ENGINES = ("python", "numpy", "tensorflow")


@dataclass(frozen=True)
class EscapeParameters:
    """Fidelity knobs of the escape-time recurrence."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    escape_threshold_sq: float = DEFAULT_ESCAPE_THRESHOLD_SQ

    def __post_init__(self) -> None:
        try:
            max_iterations = operator.index(self.max_iterations)
        except TypeError as exc:
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}.") from exc
        if max_iterations < 0:
            raise ValueError("max_iterations must be non-negative.")
        if not math.isfinite(self.escape_threshold_sq) or self.escape_threshold_sq < 0:
            raise ValueError("escape_threshold_sq must be a finite, non-negative number.")


@dataclass(frozen=True)
class GridSize:
    """Columns and rows of the display grid used as the sampling lattice."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {self.width}x{self.height}.")

    @property
    def cells(self) -> int:
        return self.width * self.height

    def contains(self, grid_x: int, grid_y: int) -> bool:
        return 0 <= grid_x < self.width and 0 <= grid_y < self.height


@dataclass(frozen=True)
class Viewport:
    """Rectangular region of the complex plane mapped onto the grid."""

    x_min: float
    width: float
    y_min: float
    height: float

    def __post_init__(self) -> None:
        for name in ("x_min", "y_min"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite.")
        for name in ("width", "height"):
            extent = getattr(self, name)
            if not math.isfinite(extent) or extent <= 0:
                raise ValueError(f"viewport {name} must be finite and positive, got {extent!r}.")

    @property
    def x_max(self) -> float:
        return self.x_min + self.width

    @property
    def y_max(self) -> float:
        return self.y_min + self.height

    def describe(self) -> str:
        return f"x: [{self.x_min:.6g}, {self.x_max:.6g}] y: [{self.y_min:.6g}, {self.y_max:.6g}]"


DEFAULT_VIEWPORT = Viewport(x_min=-3.0, width=4.0, y_min=-2.0, height=4.0)


def check_convergence(
    c: Complex,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    escape_threshold_sq: float = DEFAULT_ESCAPE_THRESHOLD_SQ,
) -> Optional[int]:
    """Return the iteration at which ``c`` escapes, or ``None`` if it stays bounded.

    ``z`` starts at zero and the threshold is tested before every update, so the
    escape index ranges over ``0..max_iterations + 1``. The loop inlines
    ``add(multiply(z, z), c)`` and ``squared_magnitude(z)`` from
    :mod:`asciibrot.arithmetic` on unpacked floats, keeping their operation order.
    """

    cr = c.re
    ci = c.im
    zr = 0.0
    zi = 0.0
    i = 0
    while True:
        if zr * zr + zi * zi > escape_threshold_sq:
            return i
        if i > max_iterations:
            return None
        zr, zi = zr * zr - zi * zi + cr, zr * zi + zi * zr + ci
        i += 1


def grid_to_plane(grid_x: int, grid_y: int, grid: GridSize, viewport: Viewport) -> Complex:
    """Map a zero-based grid cell onto its point in the complex plane."""

    if not grid.contains(grid_x, grid_y):
        raise ValueError(f"grid position ({grid_x}, {grid_y}) lies outside {grid.width}x{grid.height}.")
    x = (grid_x / grid.width) * viewport.width + viewport.x_min
    y = (grid_y / grid.height) * viewport.height + viewport.y_min
    return Complex(re=x, im=y)


def grid_axes(grid: GridSize, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Plane coordinates of every grid column and row."""

    columns = np.arange(grid.width, dtype=np.float64) / np.float64(grid.width)
    rows = np.arange(grid.height, dtype=np.float64) / np.float64(grid.height)
    xs = columns * np.float64(viewport.width) + np.float64(viewport.x_min)
    ys = rows * np.float64(viewport.height) + np.float64(viewport.y_min)
    return xs, ys


def shade_index(result: Optional[int]) -> int:
    if result is None or result < 0:
        return len(PALETTE)
    return min(max((result - 1) // 100, 0), len(PALETTE) - 1)


def shade(result: Optional[int]) -> str:
    """Shading symbol for one convergence result."""

    return SHADES[shade_index(result)]


def shade_counts(counts: np.ndarray) -> np.ndarray:
    """Vectorised :func:`shade` over an array of escape counts."""

    counts = np.asarray(counts, dtype=np.int64)
    indices = np.clip((counts - 1) // 100, 0, len(PALETTE) - 1)
    indices = np.where(counts < 0, len(PALETTE), indices)
    return np.asarray(list(SHADES))[indices]


def _python_counts(grid: GridSize, viewport: Viewport, params: EscapeParameters) -> np.ndarray:
    counts = np.full((grid.height, grid.width), BOUNDED, dtype=np.int64)
    for grid_y in range(grid.height):
        for grid_x in range(grid.width):
            c = grid_to_plane(grid_x, grid_y, grid, viewport)
            result = check_convergence(c, params.max_iterations, params.escape_threshold_sq)
            if result is not None:
                counts[grid_y, grid_x] = result
    return counts


def _numpy_counts(grid: GridSize, viewport: Viewport, params: EscapeParameters) -> np.ndarray:
    xs, ys = grid_axes(grid, viewport)
    cr, ci = np.meshgrid(xs, ys)
    zr = np.zeros_like(cr)
    zi = np.zeros_like(ci)
    counts = np.full(cr.shape, BOUNDED, dtype=np.int64)
    active = np.ones(cr.shape, dtype=bool)
    threshold = np.float64(params.escape_threshold_sq)

    with np.errstate(over="ignore", invalid="ignore"):
        for i in range(params.max_iterations + 2):
            escaped = active & (zr * zr + zi * zi > threshold)
            counts[escaped] = i
            active &= ~escaped
            if i > params.max_iterations or not active.any():
                break
            zr_new = zr * zr - zi * zi + cr
            zi_new = zr * zi + zi * zr + ci
            zr = np.where(active, zr_new, zr)
            zi = np.where(active, zi_new, zi)
    return counts


def escape_counts(
    grid: GridSize,
    viewport: Viewport,
    params: Optional[EscapeParameters] = None,
    *,
    engine: str = "numpy",
    device: Optional[str] = None,
) -> np.ndarray:
    """Escape index of every cell as a ``(height, width)`` array, ``BOUNDED`` where none."""

    params = params if params is not None else EscapeParameters()
    if engine == "python":
        return _python_counts(grid, viewport, params)
    if engine == "numpy":
        return _numpy_counts(grid, viewport, params)
    if engine == "tensorflow":
        from .tensor_engine import tensor_escape_counts

        return tensor_escape_counts(grid, viewport, params, device=device)
    raise ValueError(f"Unknown engine '{engine}'. Valid choices: {', '.join(ENGINES)}.")


def render_frame(
    grid: GridSize,
    viewport: Viewport,
    params: Optional[EscapeParameters] = None,
    *,
    engine: str = "numpy",
    device: Optional[str] = None,
) -> str:
    """Render a frame buffer of ``grid.cells`` symbols in row-major order."""

    counts = escape_counts(grid, viewport, params, engine=engine, device=device)
    return "".join(shade_counts(counts).ravel().tolist())


def frame_rows(frame: str, grid: GridSize) -> list[str]:
    if len(frame) != grid.cells:
        raise ValueError(f"frame holds {len(frame)} cells, expected {grid.cells}.")
    return [frame[row * grid.width:(row + 1) * grid.width] for row in range(grid.height)]
