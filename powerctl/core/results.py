"""
Result types shared by the controller and its adapters.

Two kinds of outcome exist on purpose:
- TransitionResult is the hard result handed back to the caller.
- StepOutcome records a best-effort step; it is logged and kept for display
  but never changes a TransitionResult.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum


class TransitionKind(IntEnum):
    """Payload of the sleep/resume notifications"""
    SUSPEND = 0
    HIBERNATE = 1

    @property
    def action(self) -> str:
        """Method name on the login1 manager"""
        return "Suspend" if self is TransitionKind.SUSPEND else "Hibernate"

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class TransitionResult:
    success: bool
    kind: str  # "shutdown" | "suspend" | "hibernate"
    error: str | None = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, kind: str) -> TransitionResult:
        return cls(success=True, kind=kind)

    @classmethod
    def failed(cls, kind: str, error: str) -> TransitionResult:
        return cls(success=False, kind=kind, error=error)


@dataclass(frozen=True)
class StepOutcome:
    step: str
    ok: bool
    detail: str | None = None
    count: int | None = None  # collections locked, for the keyring step


@dataclass(frozen=True)
class ActionReply:
    """Raw outcome of a login1 call"""
    ok: bool
    error: str | None = None
    no_reply: bool = False  # the bus gave up waiting for an answer
