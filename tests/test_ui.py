"""Tests for snapshot rendering."""

from __future__ import annotations

import io

from rich.console import Console

from twofa.models import AccountView, Snapshot, Verdict, WorkflowState
from twofa.ui import build


def _render(view: Snapshot) -> str:
    console = Console(file=io.StringIO(), width=80, record=True)
    console.print(build(view))
    return console.export_text()


def test_empty_listing():
    text = _render(Snapshot(state=WorkflowState.LISTING))
    assert "CLI 2FA Tool" in text
    assert "No accounts yet" in text
    assert "Press q/esc to quit" in text


def test_listing_marks_selected_account():
    view = Snapshot(
        state=WorkflowState.LISTING,
        accounts=(
            AccountView(name="alice", issuer="GitHub", current_code="123456"),
            AccountView(name="bob", issuer="Acme", current_code="654321"),
        ),
        selected_index=1,
    )
    text = _render(view)
    assert "alice (GitHub): 123456" in text
    assert "▶ bob (Acme): 654321" in text


def test_name_entry_shows_buffer():
    text = _render(Snapshot(state=WorkflowState.ENTERING_NAME, name_buffer="carol", status_message="Enter name"))
    assert "Account Name: carol" in text


def test_verifying_shows_countdown_and_verdict():
    view = Snapshot(
        state=WorkflowState.VERIFYING,
        code_buffer="12",
        countdown_seconds=17,
        reference_code="999999",
        status_message="Code verified successfully!",
        verdict=Verdict.VERIFIED,
    )
    text = _render(view)
    assert "Countdown: 17s" in text
    assert "Enter code: 12" in text
    assert "✅ Code verified successfully!" in text


def test_invalid_verdict():
    view = Snapshot(
        state=WorkflowState.VERIFYING,
        status_message="Invalid code, please try again",
        verdict=Verdict.INVALID,
    )
    assert "❌ Invalid code" in _render(view)
