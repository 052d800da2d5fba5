from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, TypeVar

from rich.console import Console

from .config import RunSettings
from .logging import EventLog
from .types import StepOutcome, StepStatus

T = TypeVar("T")


class RunReport:
    """
    Outcome of every named step in one ``hmmpath`` command, in the order the steps ended.

    Work runs inside :meth:`step`. A failure is logged and recorded; in debug mode it
    is re-raised, in run mode the block is left and the command carries on, usually
    by skipping whatever needed the failed result.
    """

    def __init__(
        self,
        settings: RunSettings,
        logger: logging.Logger,
        events: Optional[EventLog] = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.events = events
        self._outcomes: Dict[str, StepOutcome] = {}

    @property
    def run_id(self) -> str:
        return self.settings.run_id

    def status(self, name: str) -> Optional[StepStatus]:
        outcome = self._outcomes.get(name)
        return outcome.status if outcome is not None else None

    def ok(self, name: str) -> bool:
        return self.status(name) is StepStatus.OK

    def outcomes(self) -> List[StepOutcome]:
        return list(self._outcomes.values())

    def count(self, status: StepStatus) -> int:
        return sum(1 for o in self._outcomes.values() if o.status is status)

    @property
    def failed(self) -> bool:
        return self.count(StepStatus.FAILED) > 0

    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def _record(self, outcome: StepOutcome, **context: Any) -> None:
        self._outcomes[outcome.step] = outcome
        if self.events is not None:
            self.events.emit(
                f"step_{outcome.status.value}",
                outcome.step,
                error_type=outcome.error_type,
                error=outcome.detail if outcome.status is StepStatus.FAILED else None,
                blocked_by=outcome.blocked_by,
                **context,
            )

    @contextmanager
    def step(self, name: str, context: Optional[Mapping[str, Any]] = None) -> Iterator[None]:
        """
        Run the ``with`` block as step ``name``.

        ``context`` (input paths and the like) goes to the event log only.
        """
        extra = {"step": name}
        self.logger.debug("Step %s started", name, extra=extra)
        try:
            yield
        except Exception as exc:
            self.logger.error("%s failed: %s: %s", name, type(exc).__name__, exc, extra=extra)
            self.logger.debug("%s traceback", name, exc_info=exc, extra=extra)
            self._record(StepOutcome.from_exception(name, exc), **dict(context or {}))
            if self.settings.mode == "debug":
                raise
        else:
            self._record(StepOutcome(name, StepStatus.OK), **dict(context or {}))

    def call(self, name: str, fn: Callable[[], T], context: Optional[Mapping[str, Any]] = None) -> Optional[T]:
        """Run ``fn`` as step ``name``; None if it failed in run mode."""
        with self.step(name, context):
            return fn()
        return None

    def skip(self, name: str, blocked_by: str) -> None:
        self.logger.warning("%s skipped: %s did not succeed", name, blocked_by, extra={"step": name})
        self._record(StepOutcome(name, StepStatus.SKIPPED, blocked_by=blocked_by))

    def summary_lines(self) -> List[str]:
        counts = ", ".join(f"{self.count(s)} {s.value}" for s in StepStatus)
        lines = [f"run {self.run_id} (mode={self.settings.mode}): {counts}"]
        for outcome in self._outcomes.values():
            lines.append(f"  {outcome.status.value:<8} {outcome.step:<16} {outcome.describe()}".rstrip())
        if self.failed:
            lines.append(f"log: {self.settings.log_file}")
            if self.events is not None:
                lines.append(f"events: {self.events.path}")
        return lines

    def print_summary(self, console: Optional[Console] = None) -> None:
        console = console or Console()
        for line in self.summary_lines():
            console.print(line, highlight=False, markup=False, soft_wrap=True)
