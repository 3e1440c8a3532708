import curses

import pytest

from asciibrot.errors import DisplayError, InputError, StartupError
from asciibrot.events import Button, Key, KeyEvent, PointerPress
from asciibrot.renderer import GridSize
from asciibrot.terminal import CursesDisplay, CursesInput, button_from_state, terminal_grid, terminal_session


class FakeScreen:
    def __init__(self, codes=(), size=(4, 6), fail_on=None):
        self.codes = list(codes)
        self.size = size
        self.fail_on = fail_on
        self.calls = []

    def getch(self):
        return self.codes.pop(0) if self.codes else -1

    def getmaxyx(self):
        return self.size

    def keypad(self, flag):
        self.calls.append(("keypad", flag))

    def _record(self, name, *args):
        if name == self.fail_on:
            raise curses.error(f"{name} failed")
        self.calls.append((name,) + args)

    def erase(self):
        self._record("erase")

    def move(self, y, x):
        self._record("move", y, x)

    def insstr(self, y, x, text):
        self._record("insstr", y, x, text)

    def refresh(self):
        self._record("refresh")


def test_keys_are_translated():
    source = CursesInput(FakeScreen(), quit_key="x")
    assert source.translate(curses.KEY_UP) == KeyEvent(Key.UP)
    assert source.translate(curses.KEY_DOWN) == KeyEvent(Key.DOWN)
    assert source.translate(curses.KEY_LEFT) == KeyEvent(Key.LEFT)
    assert source.translate(curses.KEY_RIGHT) == KeyEvent(Key.RIGHT)
    assert source.translate(ord("x")) == KeyEvent(Key.QUIT)
    assert source.translate(ord("q")) == KeyEvent(Key.OTHER)


def test_mouse_press_is_translated(monkeypatch):
    monkeypatch.setattr(curses, "getmouse", lambda: (0, 3, 2, 0, curses.BUTTON1_PRESSED))
    source = CursesInput(FakeScreen())
    assert source.translate(curses.KEY_MOUSE) == PointerPress(Button.PRIMARY, 3, 2)


def test_mouse_read_failure_is_fatal(monkeypatch):
    def broken():
        raise curses.error("no mouse event")

    monkeypatch.setattr(curses, "getmouse", broken)
    with pytest.raises(InputError):
        CursesInput(FakeScreen()).translate(curses.KEY_MOUSE)


def test_button_states():
    assert button_from_state(curses.BUTTON1_PRESSED) is Button.PRIMARY
    assert button_from_state(curses.BUTTON3_PRESSED) is Button.SECONDARY
    assert button_from_state(curses.BUTTON2_PRESSED) is Button.OTHER
    assert button_from_state(curses.BUTTON1_RELEASED) is None


def test_iteration_stops_with_error_when_stream_closes():
    events = iter(CursesInput(FakeScreen(codes=[curses.KEY_LEFT])))
    assert next(events) == KeyEvent(Key.LEFT)
    with pytest.raises(InputError):
        next(events)


def test_display_clears_homes_and_writes_rows():
    screen = FakeScreen()
    CursesDisplay(screen).show("abcdef", GridSize(3, 2))
    assert screen.calls == [
        ("erase",),
        ("move", 0, 0),
        ("insstr", 0, 0, "abc"),
        ("insstr", 1, 0, "def"),
        ("refresh",),
    ]


def test_display_failure_is_fatal():
    with pytest.raises(DisplayError):
        CursesDisplay(FakeScreen(fail_on="refresh")).show("ab", GridSize(2, 1))


def test_terminal_grid():
    assert terminal_grid(FakeScreen(size=(24, 80))) == GridSize(80, 24)
    with pytest.raises(StartupError):
        terminal_grid(FakeScreen(size=(0, 0)))


def test_session_reports_unusable_terminal(monkeypatch):
    def no_terminal():
        raise curses.error("setupterm: could not find terminal")

    monkeypatch.setattr(curses, "initscr", no_terminal)
    with pytest.raises(StartupError, match="cannot initialise"):
        with terminal_session():
            pass


def test_session_reports_raw_mode_failure_and_restores(monkeypatch):
    screen = FakeScreen()
    restored = []

    def refuse_raw():
        raise curses.error("raw() returned ERR")

    monkeypatch.setattr(curses, "initscr", lambda: screen)
    monkeypatch.setattr(curses, "noecho", lambda: None)
    monkeypatch.setattr(curses, "raw", refuse_raw)
    monkeypatch.setattr(curses, "noraw", lambda: restored.append("noraw"))
    monkeypatch.setattr(curses, "echo", lambda: restored.append("echo"))
    monkeypatch.setattr(curses, "endwin", lambda: restored.append("endwin"))

    with pytest.raises(StartupError, match="raw input mode"):
        with terminal_session():
            pass
    assert restored == ["noraw", "echo", "endwin"]
    assert ("keypad", False) in screen.calls
