"""Enrollment and verification state machine.

``Workflow.reduce`` takes the current ``AppState`` and one event and returns
the next state plus the effects the runtime should carry out. States are
never mutated in place, so the runtime can hand the previous one to the
renderer while the next is being computed.

Flow:
  listing --a--> entering_name --enter--> entering_issuer --enter--> provisioning
  provisioning --enter--> verifying;  listing --enter--> verifying
  any state --esc--> listing;  listing --esc--> quit
"""

from __future__ import annotations

import logging
import string
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from twofa import engine
from twofa.events import Effect, Event, Key, KeyEvent, Quit, TickEvent, VerifyCode, VerifyResult
from twofa.models import AccountView, Snapshot, Verdict, WorkflowState
from twofa.store import AccountStore

logger = logging.getLogger(__name__)

CODE_LENGTH = engine.DIGITS

NAME_PROMPT = "Enter account name (e.g., user@example.com)"
ISSUER_PROMPT = "Enter issuer name (e.g., Google, GitHub)"
PROVISION_PROMPT = "Scan the QR code with your authenticator app"
VERIFY_PROMPT = "Enter the 6-digit code from your authenticator app"
VERIFIED_MESSAGE = "Code verified successfully!"
INVALID_MESSAGE = "Invalid code, please try again"

# Single-key shortcuts that only mean something on the account list
ADD_KEYS = frozenset("aA")
UP_KEYS = frozenset("k")
DOWN_KEYS = frozenset("j")
QUIT_KEYS = frozenset("q")

_BUFFERS = {
    WorkflowState.ENTERING_NAME: "name_buffer",
    WorkflowState.ENTERING_ISSUER: "issuer_buffer",
    WorkflowState.VERIFYING: "code_buffer",
}


@dataclass(frozen=True)
class AppState:
    """Everything the workflow knows. One value per processed event."""

    state: WorkflowState = WorkflowState.LISTING
    store: AccountStore = field(default_factory=AccountStore)
    name_buffer: str = ""
    issuer_buffer: str = ""
    code_buffer: str = ""
    status_message: str = ""
    verdict: Verdict | None = None
    countdown_seconds: int = engine.PERIOD
    provisioning_uri: str | None = None
    reference_code: str | None = None
    # Bumped on every entry to verifying; results from earlier entries are dropped
    verify_session: int = 0


class Workflow:
    """Reducer for the enrollment/verification flow.

    ``clock`` and ``secret_source`` are the only impure collaborators; tests
    swap them for fixed values.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        secret_source: Callable[[], str] = engine.generate_secret,
    ) -> None:
        self._clock = clock
        self._secret_source = secret_source

    def initial_state(self) -> AppState:
        return AppState(countdown_seconds=engine.seconds_remaining(self._clock()))

    def reduce(self, state: AppState, event: Event) -> tuple[AppState, list[Effect]]:
        if isinstance(event, KeyEvent):
            return self._on_key(state, event)
        if isinstance(event, TickEvent):
            return self._on_tick(state, event.timestamp), []
        if isinstance(event, VerifyResult):
            return self._on_verify_result(state, event), []
        raise TypeError(f"unknown event: {event!r}")

    # -- clock ---------------------------------------------------------------

    def _on_tick(self, state: AppState, timestamp: float) -> AppState:
        store = state.store.refresh_all(timestamp)
        reference = state.reference_code
        if state.state in (WorkflowState.PROVISIONING, WorkflowState.VERIFYING) and store.selected:
            reference = engine.derive_code(store.selected.secret, timestamp)
        return replace(
            state,
            store=store,
            countdown_seconds=engine.seconds_remaining(timestamp),
            reference_code=reference,
        )

    # -- verification results ---------------------------------------------------

    def _on_verify_result(self, state: AppState, result: VerifyResult) -> AppState:
        if (
            state.state != WorkflowState.VERIFYING
            or result.session != state.verify_session
            or result.account_index != state.store.selected_index
        ):
            logger.debug("Dropping stale verification result for account #%d", result.account_index)
            return state
        if result.valid:
            logger.info("Code verified for account #%d", result.account_index)
            return replace(state, verdict=Verdict.VERIFIED, status_message=VERIFIED_MESSAGE, code_buffer="")
        logger.info("Invalid code for account #%d", result.account_index)
        return replace(state, verdict=Verdict.INVALID, status_message=INVALID_MESSAGE, code_buffer="")

    # -- keyboard --------------------------------------------------------------

    def _on_key(self, state: AppState, event: KeyEvent) -> tuple[AppState, list[Effect]]:
        key = event.key
        if key == Key.CANCEL:
            return self._cancel(state)
        if key == Key.CONFIRM:
            return self._confirm(state)
        if key in (Key.UP, Key.DOWN):
            if state.state == WorkflowState.LISTING:
                return replace(state, store=state.store.move(-1 if key == Key.UP else 1)), []
            return state, []
        if key == Key.BACKSPACE:
            return self._backspace(state), []
        if key == Key.CHARACTER:
            return self._character(state, event.char)
        raise TypeError(f"unknown key: {key!r}")

    def _cancel(self, state: AppState) -> tuple[AppState, list[Effect]]:
        if state.state == WorkflowState.LISTING:
            return state, [Quit()]
        return self._enter_listing(state), []

    def _confirm(self, state: AppState) -> tuple[AppState, list[Effect]]:
        current = state.state

        if current == WorkflowState.LISTING:
            if not state.store:
                return state, []
            return self._enter_verifying(replace(state, store=state.store.select(state.store.selected_index))), []

        if current == WorkflowState.ENTERING_NAME:
            if not state.name_buffer:
                return state, []
            return replace(state, state=WorkflowState.ENTERING_ISSUER, status_message=ISSUER_PROMPT), []

        if current == WorkflowState.ENTERING_ISSUER:
            if not state.issuer_buffer:
                return state, []
            return self._enroll(state), []

        if current == WorkflowState.PROVISIONING:
            return self._enter_verifying(state), []

        if current == WorkflowState.VERIFYING:
            index = state.store.selected_index
            account = state.store.get(index)
            request = VerifyCode(index, account.secret, state.code_buffer, self._clock(), state.verify_session)
            return state, [request]

        raise TypeError(f"unknown workflow state: {current!r}")

    def _backspace(self, state: AppState) -> AppState:
        attr = _BUFFERS.get(state.state)
        if attr is None:
            return state
        return replace(state, **{attr: getattr(state, attr)[:-1]})

    def _character(self, state: AppState, char: str) -> tuple[AppState, list[Effect]]:
        if len(char) != 1 or not char.isprintable():
            return state, []

        if state.state == WorkflowState.LISTING:
            if char in ADD_KEYS:
                return self._enter_name(state), []
            if char in UP_KEYS:
                return replace(state, store=state.store.move(-1)), []
            if char in DOWN_KEYS:
                return replace(state, store=state.store.move(1)), []
            if char in QUIT_KEYS:
                return self._cancel(state)
            return state, []

        if state.state == WorkflowState.VERIFYING:
            if char not in string.digits or len(state.code_buffer) >= CODE_LENGTH:
                return state, []
            return replace(state, code_buffer=state.code_buffer + char), []

        attr = _BUFFERS.get(state.state)
        if attr is None:
            return state, []
        return replace(state, **{attr: getattr(state, attr) + char}), []

    # -- state entry -----------------------------------------------------------

    def _enter_listing(self, state: AppState) -> AppState:
        return replace(
            state,
            state=WorkflowState.LISTING,
            name_buffer="",
            issuer_buffer="",
            code_buffer="",
            status_message="",
            verdict=None,
            provisioning_uri=None,
            reference_code=None,
        )

    def _enter_name(self, state: AppState) -> AppState:
        return replace(
            state,
            state=WorkflowState.ENTERING_NAME,
            name_buffer="",
            issuer_buffer="",
            code_buffer="",
            status_message=NAME_PROMPT,
            verdict=None,
        )

    def _enroll(self, state: AppState) -> AppState:
        try:
            secret = self._secret_source()
        except engine.GenerationError as e:
            logger.warning("Secret generation failed: %s", e)
            return replace(state, status_message=f"Error generating secret: {e}")

        now = self._clock()
        store, index = state.store.add(state.name_buffer, state.issuer_buffer, secret)
        store = store.refresh_all(now)
        logger.info("Enrolled account #%d for issuer %r", index, state.issuer_buffer)
        return replace(
            state,
            state=WorkflowState.PROVISIONING,
            store=store,
            name_buffer="",
            issuer_buffer="",
            status_message=PROVISION_PROMPT,
            provisioning_uri=engine.build_provisioning_uri(state.issuer_buffer, state.name_buffer, secret),
            reference_code=engine.derive_code(secret, now),
        )

    def _enter_verifying(self, state: AppState) -> AppState:
        account = state.store.get(state.store.selected_index)
        return replace(
            state,
            state=WorkflowState.VERIFYING,
            code_buffer="",
            verify_session=state.verify_session + 1,
            status_message=VERIFY_PROMPT,
            verdict=None,
            provisioning_uri=None,
            reference_code=engine.derive_code(account.secret, self._clock()),
        )


def snapshot(state: AppState) -> Snapshot:
    """Build the renderer's read-only view of ``state``."""
    return Snapshot(
        state=state.state,
        accounts=tuple(
            AccountView(name=a.name, issuer=a.issuer, current_code=a.current_code) for a in state.store
        ),
        selected_index=state.store.selected_index,
        name_buffer=state.name_buffer,
        issuer_buffer=state.issuer_buffer,
        code_buffer=state.code_buffer,
        status_message=state.status_message,
        verdict=state.verdict,
        countdown_seconds=state.countdown_seconds,
        provisioning_uri=state.provisioning_uri,
        reference_code=state.reference_code,
    )
