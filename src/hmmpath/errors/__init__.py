"""
errors subpackage: domain exceptions plus the failure handling and logging of CLI runs.

- HMMError and subclasses: ValidationError, DecodeError, FormatError, ...
- RunSettings: debug/run mode, log directory and run id of one command
- configure_logging(): Rich console, run log file, optional JSONL event log
- RunReport: per-step outcomes, ``step()`` blocks and the end-of-run summary
- Pipeline: ordered steps that skip work whose inputs failed
"""

from .types import (
    DecodeError,
    ForbiddenEmissionError,
    ForbiddenTransitionError,
    FormatError,
    HMMError,
    StepOutcome,
    StepStatus,
    UnknownStateError,
    ValidationError,
)
from .config import ConfigError, RunSettings
from .logging import EventLog, configure_logging
from .reporter import RunReport
from .pipeline import Pipeline

__all__ = [
    "HMMError",
    "ValidationError",
    "ForbiddenTransitionError",
    "ForbiddenEmissionError",
    "UnknownStateError",
    "DecodeError",
    "FormatError",
    "StepOutcome",
    "StepStatus",
    "ConfigError",
    "RunSettings",
    "EventLog",
    "configure_logging",
    "RunReport",
    "Pipeline",
]
