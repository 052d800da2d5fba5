"""Validated, read-only HMM: state space, transition and emission tables."""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np

from hmmpath.errors.types import ForbiddenEmissionError, ForbiddenTransitionError, ValidationError
from hmmpath.model.state_space import StateSpace

TransitionSpec = Tuple[str, str, float]
EmissionSpec = Tuple[str, int, float]


def _readonly(values: np.ndarray) -> np.ndarray:
    out = np.array(values, dtype=float, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, eq=False)
class Model:
    """
    Discrete left-to-right HMM.

    Attributes
    ----------
    states
        State names and indices; index 0 is the start state, the last index the end state.
    alphabet_size
        Number of symbols; symbols are indices ``0..alphabet_size-1``.
    transition_prob
        Shape (S, S), ``transition_prob[i, j]`` is the probability of moving from i to j.
    emission_prob
        Shape (S, alphabet_size), ``emission_prob[s, k]`` is the probability that s emits k.

    Both tables are dense and read-only. Construction enforces the same rules as
    :func:`build_model` on whole tables: finite non-negative entries, nothing out of
    the end state or into the start state, no emissions at either boundary state.
    """

    states: StateSpace
    alphabet_size: int
    transition_prob: np.ndarray
    emission_prob: np.ndarray

    def __post_init__(self) -> None:
        n = len(self.states)
        n_symbols = _check_alphabet_size(self.alphabet_size)
        transition = _readonly(self.transition_prob)
        emission = _readonly(self.emission_prob)
        if transition.shape != (n, n):
            raise ValidationError(f"transition_prob must have shape ({n}, {n}), got {transition.shape}")
        if emission.shape != (n, n_symbols):
            raise ValidationError(f"emission_prob must have shape ({n}, {n_symbols}), got {emission.shape}")
        for label, table in (("transition_prob", transition), ("emission_prob", emission)):
            bad = np.argwhere(~np.isfinite(table) | (table < 0.0))
            if bad.size:
                i, j = (int(v) for v in bad[0])
                raise ValidationError(
                    f"{label}[{i}, {j}] must be a finite non-negative number, got {table[i, j]}"
                )

        start, end = self.states.start, self.states.end
        if transition[end].any():
            dst = int(np.flatnonzero(transition[end])[0])
            raise ForbiddenTransitionError(
                f"Transition from end state forbidden: '{self.states.name(end)}' -> '{self.states.name(dst)}'"
            )
        if transition[:, start].any():
            src = int(np.flatnonzero(transition[:, start])[0])
            raise ForbiddenTransitionError(
                f"Transition to start state forbidden: '{self.states.name(src)}' -> '{self.states.name(start)}'"
            )
        for boundary in (start, end):
            if emission[boundary].any():
                raise ForbiddenEmissionError(
                    f"Emission from boundary state forbidden: '{self.states.name(boundary)}' (index {boundary})"
                )

        object.__setattr__(self, "alphabet_size", n_symbols)
        object.__setattr__(self, "transition_prob", transition)
        object.__setattr__(self, "emission_prob", emission)

    @property
    def n_states(self) -> int:
        return len(self.states)

    @property
    def start_state(self) -> int:
        return self.states.start

    @property
    def end_state(self) -> int:
        return self.states.end

    def state_index(self, name: str) -> int:
        return self.states.index(name)

    def state_name(self, index: int) -> str:
        return self.states.name(index)

    def transitions(self) -> Iterator[TransitionSpec]:
        """Yield the non-zero transitions as (from_name, to_name, probability)."""

        for src, dst in zip(*np.nonzero(self.transition_prob)):
            yield self.states.name(int(src)), self.states.name(int(dst)), float(self.transition_prob[src, dst])

    def emissions(self) -> Iterator[EmissionSpec]:
        """Yield the non-zero emissions as (state_name, symbol, probability)."""

        for state, symbol in zip(*np.nonzero(self.emission_prob)):
            yield self.states.name(int(state)), int(symbol), float(self.emission_prob[state, symbol])


# ---------- Construction ----------


def _as_index(value: int) -> int:
    # bools are ints to operator.index; a flag is never a count or a symbol
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"expected an integer, got {value!r}")
    return operator.index(value)


def _check_probability(value: float, *, what: str) -> float:
    if isinstance(value, (bool, np.bool_)):
        raise ValidationError(f"Probability for {what} is not a number: {value!r}")
    try:
        prob = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Probability for {what} is not a number: {value!r}") from None
    if not math.isfinite(prob) or prob < 0.0:
        raise ValidationError(f"Probability for {what} must be a finite non-negative number, got {prob}")
    return prob


def _check_alphabet_size(value: int) -> int:
    try:
        size = _as_index(value)
    except TypeError:
        raise ValidationError(f"Alphabet size must be an integer, got {value!r}") from None
    if size < 1:
        raise ValidationError(f"Alphabet size must be positive, got {size}")
    return size


def _check_symbol(value: int, alphabet_size: int) -> int:
    try:
        symbol = _as_index(value)
    except TypeError:
        raise ValidationError(f"Symbol must be an integer index, got {value!r}") from None
    if symbol < 0 or symbol >= alphabet_size:
        raise ValidationError(f"Symbol {symbol} out of range 0..{alphabet_size - 1}")
    return symbol


def build_model(
    state_names: Sequence[str],
    alphabet_size: int,
    transitions: Iterable[TransitionSpec],
    emissions: Iterable[EmissionSpec],
) -> Model:
    """
    Build a validated model from named transition and emission triples.

    Parameters
    ----------
    state_names
        Ordered names; the first is the start state, the last the end state.
    alphabet_size
        Number of emitted symbols.
    transitions
        ``(from_name, to_name, probability)`` triples. Unlisted pairs stay 0.
    emissions
        ``(state_name, symbol_index, probability)`` triples. Unlisted pairs stay 0.

    Raises
    ------
    ForbiddenTransitionError
        Transition out of the end state or into the start state.
    ForbiddenEmissionError
        Emission attached to the start or end state.
    UnknownStateError
        A triple names a state missing from ``state_names``.
    ValidationError
        Any other malformed input (too few or duplicate states, bad symbol or probability).

    Later triples for the same cell overwrite earlier ones. On failure nothing is
    returned; the tables under construction are discarded.
    """

    states = StateSpace(state_names)
    n = len(states)
    n_symbols = _check_alphabet_size(alphabet_size)

    transition = np.zeros((n, n), dtype=float)
    for from_name, to_name, prob in transitions:
        src = states.index(from_name)
        dst = states.index(to_name)
        if src == states.end:
            raise ForbiddenTransitionError(
                f"Transition from end state forbidden: '{from_name}' -> '{to_name}'"
            )
        if dst == states.start:
            raise ForbiddenTransitionError(
                f"Transition to start state forbidden: '{from_name}' -> '{to_name}'"
            )
        transition[src, dst] = _check_probability(prob, what=f"transition '{from_name}' -> '{to_name}'")

    emission = np.zeros((n, n_symbols), dtype=float)
    for state_name, symbol, prob in emissions:
        state = states.index(state_name)
        if states.is_boundary(state):
            raise ForbiddenEmissionError(
                f"Emission from boundary state forbidden: '{state_name}' (index {state})"
            )
        sym = _check_symbol(symbol, n_symbols)
        emission[state, sym] = _check_probability(prob, what=f"emission '{state_name}' -> {sym}")

    return Model(states=states, alphabet_size=n_symbols, transition_prob=transition, emission_prob=emission)
