"""Input events consumed by the interaction loop."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Key(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    QUIT = "quit"
    OTHER = "other"


class Button(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    key: Key


@dataclass(frozen=True)
class PointerPress:
    """A pointer button press at a zero-based grid position."""

    button: Button
    grid_x: int
    grid_y: int


Event = Union[KeyEvent, PointerPress]

ARROW_KEYS = frozenset({Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT})
