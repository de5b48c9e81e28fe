"""Pydantic models for accounts and the renderer's view of the workflow."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class WorkflowState(StrEnum):
    LISTING = "listing"
    ENTERING_NAME = "entering_name"
    ENTERING_ISSUER = "entering_issuer"
    PROVISIONING = "provisioning"
    VERIFYING = "verifying"


class Verdict(StrEnum):
    VERIFIED = "verified"
    INVALID = "invalid"


class Account(BaseModel):
    """An enrolled credential. The secret is fixed at creation."""

    model_config = ConfigDict(frozen=True)

    name: str
    issuer: str
    secret: str = Field(repr=False)
    current_code: str = ""

    def with_code(self, code: str) -> Account:
        return self.model_copy(update={"current_code": code})


class AccountView(BaseModel):
    """What the renderer may see of an account (no secret)."""

    model_config = ConfigDict(frozen=True)

    name: str
    issuer: str
    current_code: str


class Snapshot(BaseModel):
    """Read-only view of the workflow handed to the renderer after every event."""

    model_config = ConfigDict(frozen=True)

    state: WorkflowState
    accounts: tuple[AccountView, ...] = ()
    selected_index: int = 0
    name_buffer: str = ""
    issuer_buffer: str = ""
    code_buffer: str = ""
    status_message: str = ""
    verdict: Verdict | None = None
    countdown_seconds: int = 30
    provisioning_uri: str | None = None
    reference_code: str | None = None
