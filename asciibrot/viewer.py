"""Interactive pan/zoom loop driving the renderer."""

from __future__ import annotations

import time
from typing import Callable, Iterable, Optional, Protocol

from .events import Event, Key, KeyEvent
from .navigation import Navigator
from .renderer import DEFAULT_VIEWPORT, EscapeParameters, GridSize, Viewport, render_frame


class Display(Protocol):
    def show(self, frame: str, grid: GridSize) -> None:
        ...


def _silent(message, *args, **kwargs):
    pass


class InteractiveViewer:
    """Own the live viewport and redraw it after every pan or zoom."""

    def __init__(
        self,
        source: Iterable[Event],
        display: Display,
        grid_probe: Callable[[], GridSize],
        *,
        navigator: Optional[Navigator] = None,
        params: Optional[EscapeParameters] = None,
        viewport: Viewport = DEFAULT_VIEWPORT,
        engine: str = "numpy",
        device: Optional[str] = None,
        track_resize: bool = False,
        log: Callable[..., None] = _silent,
    ) -> None:
        self.source = source
        self.display = display
        self.grid_probe = grid_probe
        self.navigator = navigator if navigator is not None else Navigator()
        self.params = params if params is not None else EscapeParameters()
        self.viewport = viewport
        self.engine = engine
        self.device = device
        self.track_resize = track_resize
        self.log = log
        self.grid = grid_probe()
        self.frames_drawn = 0

    def redraw(self) -> str:
        if self.track_resize:
            self.grid = self.grid_probe()
        started = time.perf_counter()
        frame = render_frame(self.grid, self.viewport, self.params, engine=self.engine, device=self.device)
        elapsed = time.perf_counter() - started
        self.display.show(frame, self.grid)
        self.frames_drawn += 1
        self.log(
            "frame %d %dx%d %s rendered in %.3fs"
            % (self.frames_drawn, self.grid.width, self.grid.height, self.viewport.describe(), elapsed)
        )
        return frame

    def handle(self, event: Event) -> bool:
        """Apply one event; return False when the session should end."""

        if isinstance(event, KeyEvent) and event.key is Key.QUIT:
            return False
        updated = self.navigator.apply(self.viewport, event, self.grid)
        if updated is None:
            return True
        self.viewport = updated
        self.redraw()
        return True

    def run(self) -> Viewport:
        self.redraw()
        for event in self.source:
            if not self.handle(event):
                break
        return self.viewport
