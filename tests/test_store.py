"""Tests for the account store."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from twofa.engine import derive_code
from twofa.store import AccountStore, IndexOutOfRange

SECRET_A = "JBSWY3DPEHPK3PXP"
SECRET_B = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def _store(n: int = 3) -> AccountStore:
    store = AccountStore()
    for i in range(n):
        store, _ = store.add(f"user{i}@example.com", f"Issuer{i}", SECRET_A)
    return store


def test_add_appends_and_selects():
    store = AccountStore()
    store, first = store.add("alice@example.com", "GitHub", SECRET_A)
    store, second = store.add("bob@example.com", "Google", SECRET_B)
    assert (first, second) == (0, 1)
    assert store.selected_index == 1
    assert [a.name for a in store] == ["alice@example.com", "bob@example.com"]
    assert store.selected.issuer == "Google"


def test_add_does_not_mutate_original():
    empty = AccountStore()
    empty.add("alice@example.com", "GitHub", SECRET_A)
    assert len(empty) == 0


def test_get_out_of_range():
    store = _store(2)
    assert store.get(1).name == "user1@example.com"
    with pytest.raises(IndexOutOfRange):
        store.get(2)
    with pytest.raises(IndexError):
        store.get(-1)
    with pytest.raises(IndexOutOfRange):
        AccountStore().get(0)


def test_select():
    store = _store(3).select(0)
    assert store.selected_index == 0
    with pytest.raises(IndexOutOfRange):
        store.select(3)


def test_move_clamps():
    store = _store(3).select(0)
    assert store.move(-1).selected_index == 0
    assert store.move(1).move(1).move(1).selected_index == 2


def test_move_on_empty_store():
    store = AccountStore()
    assert store.move(1) is store
    assert store.selected is None


def test_refresh_all_updates_codes_only():
    store, _ = AccountStore().add("alice@example.com", "GitHub", SECRET_A)
    store, _ = store.add("bob@example.com", "Google", SECRET_B)
    store = store.select(0)
    refreshed = store.refresh_all(1_700_000_000)
    assert [a.current_code for a in refreshed] == [
        derive_code(SECRET_A, 1_700_000_000),
        derive_code(SECRET_B, 1_700_000_000),
    ]
    assert [a.secret for a in refreshed] == [SECRET_A, SECRET_B]
    assert [a.name for a in refreshed] == ["alice@example.com", "bob@example.com"]
    assert refreshed.selected_index == 0
    assert store.get(0).current_code == ""


def test_secret_cannot_be_reassigned():
    account = _store(1).get(0)
    with pytest.raises(ValidationError):
        account.secret = SECRET_B


def test_secret_not_in_repr():
    assert SECRET_A not in repr(_store(1).get(0))
