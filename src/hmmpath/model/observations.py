"""Observation records for a single decoding run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Tuple

import numpy as np

from hmmpath.model.hmm import Model


class Observation(NamedTuple):
    """One time step: step number, ground-truth state index, emitted symbol index."""

    step: int
    state: int
    symbol: int


@dataclass(frozen=True)
class ExperimentData:
    """
    Ordered observation sequence.

    The decoder reads only ``symbol`` and relies on sequence order; ``step`` is kept
    for reporting and ``state`` is the ground truth used for evaluation.
    """

    observations: Tuple[Observation, ...] = ()

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.observations)

    @property
    def maxtime(self) -> int:
        return len(self.observations)

    def symbols(self) -> np.ndarray:
        """Emitted symbol indices, shape (T,)."""

        return np.fromiter((obs.symbol for obs in self.observations), dtype=int, count=len(self.observations))

    def true_states(self) -> List[int]:
        """Ground-truth state indices in time order."""

        return [obs.state for obs in self.observations]

    @classmethod
    def from_records(cls, records: Iterable[Tuple[int, int, int]]) -> "ExperimentData":
        """Build from ``(step, state_index, symbol_index)`` triples."""

        return cls(tuple(Observation(int(step), int(state), int(symbol)) for step, state, symbol in records))

    @classmethod
    def from_named(cls, model: Model, records: Iterable[Tuple[int, str, int]]) -> "ExperimentData":
        """
        Build from ``(step, state_name, symbol_index)`` triples.

        Ground-truth names are resolved through ``model``; an unknown name raises
        :class:`~hmmpath.errors.types.UnknownStateError` (a ``LookupError``).
        """

        return cls(
            tuple(Observation(int(step), model.state_index(name), int(symbol)) for step, name, symbol in records)
        )
