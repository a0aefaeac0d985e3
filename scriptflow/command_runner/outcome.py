# scriptflow/command_runner/outcome.py
"""
Tagged outcome of one wrapper script invocation.

Helpers return an ``Outcome`` instead of exiting; ``BaseScript.main`` is the
only place that turns it into a process exit status.
"""

from dataclasses import dataclass
from enum import Enum


class OutcomeKind(str, Enum):
    CONTINUE = "continue"
    SOFT_FAILURE = "soft_failure"
    HARD_FAILURE = "hard_failure"
    USAGE_EXIT = "usage_exit"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    exit_code: int = 0
    message: str = ""

    @classmethod
    def proceed(cls, message: str = "") -> "Outcome":
        return cls(OutcomeKind.CONTINUE, 0, message)

    @classmethod
    def soft(cls, message: str) -> "Outcome":
        """Invalid input or parameters; the recovery policy decides what happens next."""
        return cls(OutcomeKind.SOFT_FAILURE, 0, message)

    @classmethod
    def hard(cls, exit_code: int, message: str = "") -> "Outcome":
        # A failing tool must never be reported as a success
        return cls(OutcomeKind.HARD_FAILURE, exit_code or 1, message)

    @classmethod
    def usage(cls, exit_code: int, message: str = "") -> "Outcome":
        return cls(OutcomeKind.USAGE_EXIT, exit_code, message)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.CONTINUE
