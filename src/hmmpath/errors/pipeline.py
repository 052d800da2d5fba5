from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence

from .reporter import RunReport

StepFn = Callable[[Mapping[str, Any]], Any]


class _Step(NamedTuple):
    name: str
    fn: StepFn
    requires: tuple
    context: Optional[Mapping[str, Any]]


class Pipeline:
    """
    Named steps run in the order they were added.

    Each step function receives the results of the steps that succeeded before it.
    A step runs only when every step it ``requires`` succeeded; otherwise it is
    skipped, naming the first requirement that did not.

    Example::

        pipe = Pipeline(report)
        pipe.add("read_model", lambda r: load_model(model_path))
        pipe.add("decode", lambda r: viterbi(r["read_model"], data), requires=["read_model"])
        results = pipe.run()
    """

    def __init__(self, report: RunReport) -> None:
        self.report = report
        self._steps: List[_Step] = []

    def add(
        self,
        name: str,
        fn: StepFn,
        *,
        requires: Sequence[str] = (),
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        known = {s.name for s in self._steps}
        if name in known:
            raise ValueError(f"Duplicate step name: {name}")
        missing = [r for r in requires if r not in known]
        if missing:
            raise ValueError(f"Step '{name}' requires steps not added before it: {', '.join(missing)}")
        self._steps.append(_Step(name, fn, tuple(requires), context))

    def run(self) -> Dict[str, Any]:
        """Run every step; return the results of those that succeeded."""
        results: Dict[str, Any] = {}
        for name, fn, requires, context in self._steps:
            blocked_by = next((r for r in requires if not self.report.ok(r)), None)
            if blocked_by is not None:
                self.report.skip(name, blocked_by=blocked_by)
                continue
            with self.report.step(name, context):
                results[name] = fn(results)
        return results
