"""Tests for terminal key translation."""

from __future__ import annotations

import pytest

from twofa.events import Key, KeyEvent
from twofa.keys import read_key, translate


@pytest.mark.parametrize(
    ("raw", "key"),
    [
        ("\x1b[A", Key.UP),
        ("\xe0H", Key.UP),
        ("\x1b[B", Key.DOWN),
        ("\xe0P", Key.DOWN),
        ("\r", Key.CONFIRM),
        ("\n", Key.CONFIRM),
        ("\x1b", Key.CANCEL),
        ("\x7f", Key.BACKSPACE),
        ("\x08", Key.BACKSPACE),
    ],
)
def test_special_keys(raw, key):
    assert translate(raw) == KeyEvent(key)


def test_printable_characters():
    assert translate("a") == KeyEvent(Key.CHARACTER, "a")
    assert translate("7") == KeyEvent.character("7")
    assert translate("@") == KeyEvent.character("@")


@pytest.mark.parametrize("raw", ["\x1b[C", "\t", "\x01", "ab", ""])
def test_unmapped_keys(raw):
    assert translate(raw) is None


def test_read_key_uses_getchar():
    assert read_key(lambda: "\r") == KeyEvent(Key.CONFIRM)


def test_read_key_propagates_interrupt():
    def interrupted() -> str:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        read_key(interrupted)
