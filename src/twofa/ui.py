"""Rich rendering of workflow snapshots."""

from __future__ import annotations

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from twofa.models import Snapshot, Verdict, WorkflowState

WIDTH = 48

HEADER_STYLE = "bold #FFD700 on #2C3E50"
CONTENT_STYLE = "#ECF0F1"
STATUS_STYLE = "#3498DB"
SUCCESS_STYLE = "bold #2ECC71"
ERROR_STYLE = "bold #E74C3C"
COUNTDOWN_STYLE = "bold #F39C12"
CODE_STYLE = "bold #9B59B6"
INSTRUCTION_STYLE = "#1ABC9C"


def _line(text: str, style: str) -> Text:
    return Text(text, style=style, justify="center")


def _account_list(view: Snapshot) -> list[RenderableType]:
    if not view.accounts:
        return [_line("No accounts yet. Press 'a' to add a new account.", INSTRUCTION_STYLE)]
    lines: list[RenderableType] = []
    for i, acc in enumerate(view.accounts):
        selected = i == view.selected_index
        prefix = "▶ " if selected else "  "
        lines.append(
            _line(f"{prefix}{acc.name} ({acc.issuer}): {acc.current_code}", CODE_STYLE if selected else CONTENT_STYLE)
        )
    lines.append(Text(""))
    lines.append(_line("Press 'a' to add account, arrow keys to navigate, Enter to verify", INSTRUCTION_STYLE))
    return lines


def _content(view: Snapshot) -> list[RenderableType]:
    if view.state == WorkflowState.LISTING:
        return _account_list(view)
    if view.state == WorkflowState.ENTERING_NAME:
        return [_line(view.status_message, STATUS_STYLE), Text(""), _line(f"Account Name: {view.name_buffer}", CODE_STYLE)]
    if view.state == WorkflowState.ENTERING_ISSUER:
        return [_line(view.status_message, STATUS_STYLE), Text(""), _line(f"Issuer: {view.issuer_buffer}", CODE_STYLE)]
    if view.state == WorkflowState.PROVISIONING:
        return [
            _line(view.provisioning_uri or "", CONTENT_STYLE),
            Text(""),
            _line(view.reference_code or "", CODE_STYLE),
            _line("Press Enter to verify code", INSTRUCTION_STYLE),
        ]
    return [
        _line(f"Countdown: {view.countdown_seconds}s", COUNTDOWN_STYLE),
        Text(""),
        _line(f"Enter code: {view.code_buffer}", CONTENT_STYLE),
        _line(view.reference_code or "", CODE_STYLE),
    ]


def _status(view: Snapshot) -> Text | None:
    # Entry screens show their prompt inline
    if not view.status_message or view.state in (
        WorkflowState.LISTING,
        WorkflowState.ENTERING_NAME,
        WorkflowState.ENTERING_ISSUER,
    ):
        return None
    if view.verdict == Verdict.VERIFIED:
        return _line(f"✅ {view.status_message}", SUCCESS_STYLE)
    if view.verdict == Verdict.INVALID:
        return _line(f"❌ {view.status_message}", ERROR_STYLE)
    return _line(view.status_message, STATUS_STYLE)


def build(view: Snapshot) -> Panel:
    """Lay out one frame for ``view``."""
    parts: list[RenderableType] = [_line("CLI 2FA Tool", HEADER_STYLE), Text("")]
    parts.extend(_content(view))
    status = _status(view)
    if status is not None:
        parts.extend([Text(""), status])
    parts.extend([Text(""), _line("Press q/esc to quit", STATUS_STYLE)])
    return Panel(Group(*parts), border_style=STATUS_STYLE, width=WIDTH, padding=(1, 2))


class TerminalView:
    """Live-updating panel. Use as a context manager around the event loop."""

    def __init__(self, console: Console | None = None, alt_screen: bool = True) -> None:
        self._live = Live(console=console or Console(), screen=alt_screen, auto_refresh=False)

    def __enter__(self) -> TerminalView:
        self._live.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self._live.stop()

    def __call__(self, view: Snapshot) -> None:
        self._live.update(build(view), refresh=True)
