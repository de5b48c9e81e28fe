"""Translate raw terminal key strings into workflow key events."""

from __future__ import annotations

from collections.abc import Callable

import click

from twofa.events import Key, KeyEvent

# Sequences as returned by click.getchar() on POSIX terminals and the Windows console.
_SPECIAL: dict[str, Key] = {
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,
    "\xe0H": Key.UP,
    "\x00H": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "\xe0P": Key.DOWN,
    "\x00P": Key.DOWN,
    "\r": Key.CONFIRM,
    "\n": Key.CONFIRM,
    "\r\n": Key.CONFIRM,
    "\x1b": Key.CANCEL,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
}


def translate(raw: str) -> KeyEvent | None:
    """Map one raw key string to a KeyEvent, or None for keys the workflow ignores."""
    key = _SPECIAL.get(raw)
    if key is not None:
        return KeyEvent(key)
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent.character(raw)
    return None


def read_key(getchar: Callable[[], str] = click.getchar) -> KeyEvent | None:
    """Block for one keypress. Ctrl+C / Ctrl+D propagate as KeyboardInterrupt / EOFError."""
    return translate(getchar())
