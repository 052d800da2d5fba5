from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# ##########  Domain errors  ##########


class HMMError(Exception):
    """Base class for every error raised by hmmpath."""


class ValidationError(HMMError, ValueError):
    """Raised when a model description violates the HMM topology or value rules."""


class ForbiddenTransitionError(ValidationError):
    """Transition leaving the end state or entering the start state."""


class ForbiddenEmissionError(ValidationError):
    """Emission attached to the start or the end state."""


class UnknownStateError(ValidationError, LookupError):
    """Reference to a state name that the model does not define."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown state '{name}'")
        self.name = name


class DecodeError(HMMError, ValueError):
    """Raised when an observation sequence cannot be decoded."""


class FormatError(HMMError, ValueError):
    """Raised when a text model or observation source is malformed."""


# ##########  Step outcomes  ##########


class StepStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class StepOutcome:
    """What happened to one named step of a CLI run."""

    step: str
    status: StepStatus
    detail: str = ""
    error_type: Optional[str] = None
    blocked_by: Optional[str] = None

    @classmethod
    def from_exception(cls, step: str, exc: BaseException) -> "StepOutcome":
        return cls(step, StepStatus.FAILED, detail=str(exc), error_type=type(exc).__name__)

    def describe(self) -> str:
        if self.status is StepStatus.FAILED:
            return f"{self.error_type}: {self.detail}"
        if self.status is StepStatus.SKIPPED:
            return f"blocked by {self.blocked_by}"
        return self.detail
