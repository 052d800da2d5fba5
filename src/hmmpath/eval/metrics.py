"""Evaluation of decoded paths against ground-truth states."""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np


def _aligned(predicted: Sequence[int], truth: Sequence[int]) -> tuple[np.ndarray, np.ndarray]:
    pred = np.asarray(predicted, dtype=int)
    ref = np.asarray(truth, dtype=int)
    if pred.shape != ref.shape:
        raise ValueError(f"Length mismatch: {len(pred)} predicted vs {len(ref)} ground-truth states")
    return pred, ref


def accuracy(predicted: Sequence[int], truth: Sequence[int]) -> float:
    """Fraction of time steps where the decoded state equals the ground truth."""

    pred, ref = _aligned(predicted, truth)
    if pred.size == 0:
        return 1.0
    return float(np.mean(pred == ref))


def confusion_counts(predicted: Sequence[int], truth: Sequence[int], n_states: int) -> np.ndarray:
    """Counts with ground-truth states on rows and decoded states on columns, shape (S, S)."""

    pred, ref = _aligned(predicted, truth)
    counts = np.zeros((n_states, n_states), dtype=int)
    np.add.at(counts, (ref, pred), 1)
    return counts


def per_state_recall(predicted: Sequence[int], truth: Sequence[int], n_states: int) -> Dict[int, float]:
    """Recall per state, for the states that occur in the ground truth."""

    counts = confusion_counts(predicted, truth, n_states)
    support = counts.sum(axis=1)
    return {s: float(counts[s, s] / support[s]) for s in range(n_states) if support[s] > 0}
