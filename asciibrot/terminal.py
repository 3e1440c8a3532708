"""curses-backed input source and display sink."""

from __future__ import annotations

import curses
from contextlib import contextmanager
from typing import Iterator, Optional

from .errors import DisplayError, InputError, StartupError
from .events import Button, Event, Key, KeyEvent, PointerPress
from .renderer import GridSize, frame_rows

_ARROWS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
}

_PRESS_MASK = (
    curses.BUTTON1_PRESSED
    | curses.BUTTON2_PRESSED
    | curses.BUTTON3_PRESSED
    | curses.BUTTON1_CLICKED
    | curses.BUTTON2_CLICKED
    | curses.BUTTON3_CLICKED
)


@contextmanager
def terminal_session() -> Iterator["curses.window"]:
    """Put the terminal in raw mode with mouse reporting and restore it on exit."""

    try:
        screen = curses.initscr()
    except curses.error as exc:
        raise StartupError(f"cannot initialise the terminal: {exc}") from exc
    try:
        try:
            curses.noecho()
            curses.raw()
            screen.keypad(True)
            curses.mousemask(_PRESS_MASK)
            curses.mouseinterval(0)
            try:
                curses.curs_set(0)
            except curses.error:
                # Some terminals cannot hide the cursor.
                pass
        except curses.error as exc:
            raise StartupError(f"cannot enter raw input mode: {exc}") from exc
        yield screen
    finally:
        screen.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()


def terminal_grid(screen: "curses.window") -> GridSize:
    """Current terminal dimensions as a grid."""

    rows, columns = screen.getmaxyx()
    try:
        return GridSize(width=columns, height=rows)
    except ValueError as exc:
        raise StartupError(f"unusable terminal size: {exc}") from exc


def button_from_state(bstate: int) -> Optional[Button]:
    if bstate & (curses.BUTTON1_PRESSED | curses.BUTTON1_CLICKED):
        return Button.PRIMARY
    if bstate & (curses.BUTTON3_PRESSED | curses.BUTTON3_CLICKED):
        return Button.SECONDARY
    if bstate & _PRESS_MASK:
        return Button.OTHER
    return None


class CursesInput:
    """Blocking iterator over key and pointer events read from ``screen``."""

    def __init__(self, screen: "curses.window", quit_key: str = "q") -> None:
        self.screen = screen
        self.quit_code = ord(quit_key)

    def translate(self, code: int) -> Event:
        if code == self.quit_code:
            return KeyEvent(Key.QUIT)
        if code in _ARROWS:
            return KeyEvent(_ARROWS[code])
        if code == curses.KEY_MOUSE:
            try:
                _, x, y, _, bstate = curses.getmouse()
            except curses.error as exc:
                raise InputError(f"cannot read pointer state: {exc}") from exc
            button = button_from_state(bstate)
            if button is None:
                return KeyEvent(Key.OTHER)
            return PointerPress(button=button, grid_x=x, grid_y=y)
        return KeyEvent(Key.OTHER)

    def read(self) -> Event:
        try:
            code = self.screen.getch()
        except curses.error as exc:
            raise InputError(f"cannot read input: {exc}") from exc
        if code == -1:
            raise InputError("input stream closed")
        return self.translate(code)

    def __iter__(self) -> Iterator[Event]:
        while True:
            yield self.read()


class CursesDisplay:
    """Full-screen redraw of a frame buffer."""

    def __init__(self, screen: "curses.window") -> None:
        self.screen = screen

    def show(self, frame: str, grid: GridSize) -> None:
        rows = frame_rows(frame, grid)
        try:
            self.screen.erase()
            self.screen.move(0, 0)
            for row_index, row in enumerate(rows):
                # insstr does not advance the cursor, so the bottom-right cell is writable.
                self.screen.insstr(row_index, 0, row)
            self.screen.refresh()
        except curses.error as exc:
            raise DisplayError(f"cannot draw frame: {exc}") from exc
