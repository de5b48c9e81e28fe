"""Events consumed by the workflow reducer and effects it asks the runtime to perform.

Events come from three sources (keyboard, clock, verification worker) and are
merged into one queue; effects flow the other way.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Key(StrEnum):
    UP = "up"
    DOWN = "down"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    BACKSPACE = "backspace"
    CHARACTER = "character"


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: str = ""

    @classmethod
    def character(cls, char: str) -> KeyEvent:
        return cls(Key.CHARACTER, char)


@dataclass(frozen=True)
class TickEvent:
    timestamp: float


@dataclass(frozen=True)
class VerifyResult:
    account_index: int
    valid: bool
    session: int


Event = KeyEvent | TickEvent | VerifyResult


@dataclass(frozen=True)
class VerifyCode:
    """Check ``candidate`` off the reducer thread. Carries everything it needs by value."""

    account_index: int
    secret: str = field(repr=False)
    candidate: str
    timestamp: float
    session: int


@dataclass(frozen=True)
class Quit:
    pass


Effect = VerifyCode | Quit
