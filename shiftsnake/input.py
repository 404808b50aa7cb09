"""Player actions and the key bindings that produce them."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Turn:
    direction: str


@dataclass(frozen=True)
class Burst:
    pass


Action = Union[Turn, Burst]

KEY_TO_ACTION = {
    "ArrowUp": Turn("up"),
    "ArrowDown": Turn("down"),
    "ArrowLeft": Turn("left"),
    "ArrowRight": Turn("right"),
    "w": Turn("up"),
    "s": Turn("down"),
    "a": Turn("left"),
    "d": Turn("right"),
    "W": Turn("up"),
    "S": Turn("down"),
    "A": Turn("left"),
    "D": Turn("right"),
    " ": Burst(),
    "Space": Burst(),
    "z": Burst(),
    "Z": Burst(),
    "x": Burst(),
    "X": Burst(),
}


def key_to_action(key: str) -> Optional[Action]:
    return KEY_TO_ACTION.get(key)
