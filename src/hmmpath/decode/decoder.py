"""Viterbi most-probable-path decoding for left-to-right discrete HMMs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from hmmpath.errors.types import DecodeError
from hmmpath.model.hmm import Model
from hmmpath.model.observations import ExperimentData

# Probability mass of being in the start state before the first observation.
BEGIN_STATE_PROBABILITY: float = 1.0
# Predecessor reported for the first time step.
NO_PREDECESSOR: Optional[int] = None


@dataclass(frozen=True)
class Trellis:
    """
    Viterbi dynamic-programming tables, both shaped (T, S).

    ``sequence_probability[t, s]`` is the probability of the best state sequence for
    observations ``0..t`` that ends in ``s``. ``back_pointer[t, s]`` is the state at
    ``t - 1`` on that sequence; row 0 holds the start state.
    """

    sequence_probability: np.ndarray
    back_pointer: np.ndarray

    @property
    def maxtime(self) -> int:
        return int(self.sequence_probability.shape[0])

    def predecessor(self, t: int, state: int) -> Optional[int]:
        """State at ``t - 1`` on the best sequence ending in ``state`` at ``t``."""

        if t == 0:
            return NO_PREDECESSOR
        return int(self.back_pointer[t, state])


@dataclass(frozen=True)
class ViterbiResult:
    path: List[int]
    path_probability: float
    trellis: Trellis


def _emitted_symbols(model: Model, observations: ExperimentData) -> np.ndarray:
    if len(observations) == 0:
        raise DecodeError("Cannot decode an empty observation sequence")
    symbols = observations.symbols()
    bad = np.flatnonzero((symbols < 0) | (symbols >= model.alphabet_size))
    if bad.size:
        t = int(bad[0])
        raise DecodeError(
            f"Observation {t} emits symbol {int(symbols[t])} outside alphabet 0..{model.alphabet_size - 1}"
        )
    return symbols


def _first_max(values: np.ndarray, axis: int = 0) -> np.ndarray:
    """First maximum along ``axis``; NaN never wins (entries are otherwise >= 0)."""

    return np.argmax(np.where(np.isnan(values), -1.0, values), axis=axis)


def build_trellis(model: Model, symbols: np.ndarray) -> Trellis:
    """
    Fill the Viterbi tables for a non-empty symbol sequence.

    Every candidate is ``prev * transition * emission``, evaluated in that order, and the
    best predecessor is the first maximum over increasing state index, so ties go to the
    lowest-indexed state. Probabilities above 1 may overflow to ``inf``; the resulting
    ``inf * 0`` NaN candidates are never chosen as a maximum.
    """

    T = len(symbols)
    S = model.n_states
    transition = model.transition_prob
    emission = model.emission_prob

    dp = np.zeros((T, S), dtype=float)
    bp = np.zeros((T, S), dtype=int)

    with np.errstate(over="ignore", invalid="ignore"):
        # only the start state is admissible before the first observation
        dp[0] = BEGIN_STATE_PROBABILITY * transition[model.start_state] * emission[:, symbols[0]]
        bp[0] = model.start_state

        for t in range(1, T):
            cand = dp[t - 1][:, None] * transition * emission[:, symbols[t]][None, :]  # (prev, cur)
            # lowest index wins ties
            bp[t] = _first_max(cand, axis=0)
            dp[t] = cand[bp[t], np.arange(S)]

    dp.setflags(write=False)
    bp.setflags(write=False)
    return Trellis(sequence_probability=dp, back_pointer=bp)


def backtrack(trellis: Trellis) -> List[int]:
    """Recover the best path, one state per observation, in time order."""

    T = trellis.maxtime
    path = [0] * T
    path[-1] = int(_first_max(trellis.sequence_probability[-1]))
    for t in range(T - 1, 0, -1):
        path[t - 1] = int(trellis.back_pointer[t, path[t]])
    return path


def viterbi(model: Model, observations: ExperimentData) -> ViterbiResult:
    """
    Decode the most probable hidden-state sequence.

    Parameters
    ----------
    model
        Validated model.
    observations
        Observation sequence; only the symbols and their order are used.

    Returns
    -------
    ViterbiResult
        ``path`` holds one state index per observation (the implicit start and end
        states are not included), ``path_probability`` its joint probability with
        the observations, ``trellis`` the filled tables.

    Raises
    ------
    DecodeError
        The sequence is empty or emits a symbol outside the model alphabet.

    Zero-probability inputs are valid: the path is still returned, biased towards
    low state indices by the tie-break.
    """

    symbols = _emitted_symbols(model, observations)
    trellis = build_trellis(model, symbols)
    path = backtrack(trellis)
    return ViterbiResult(
        path=path,
        path_probability=float(trellis.sequence_probability[-1, path[-1]]),
        trellis=trellis,
    )


def decode(model: Model, observations: ExperimentData) -> List[int]:
    """Return the most probable state index per observation."""

    return viterbi(model, observations).path


def decode_names(model: Model, observations: ExperimentData) -> List[str]:
    """Like :func:`decode`, with state names instead of indices."""

    return [model.state_name(s) for s in decode(model, observations)]
