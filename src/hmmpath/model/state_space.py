"""State-space definitions: ordered state names and their dense indices."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Tuple

from hmmpath.errors.types import UnknownStateError, ValidationError

# ##########  Boundary convention  ##########

START_STATE: int = 0


class StateSpace:
    """
    Bijective mapping between state names and indices ``0..n-1``.

    Insertion order defines the indices. Index 0 is the start state and the last
    index is the end state, so at least two distinct names are required.
    """

    __slots__ = ("_names", "_index")

    def __init__(self, names: Iterable[str]) -> None:
        ordered: Tuple[str, ...] = tuple(names)
        if len(ordered) < 2:
            raise ValidationError(
                f"A model needs distinct start and end states; got {len(ordered)} state(s)."
            )
        index: Dict[str, int] = {}
        for idx, name in enumerate(ordered):
            if name in index:
                raise ValidationError(f"Duplicate state name '{name}' (indices {index[name]} and {idx}).")
            index[name] = idx
        self._names = ordered
        self._index = index

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateSpace):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"StateSpace({list(self._names)!r})"

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def start(self) -> int:
        return START_STATE

    @property
    def end(self) -> int:
        return len(self._names) - 1

    def index(self, name: str) -> int:
        """Return index for a state name."""

        try:
            return self._index[name]
        except KeyError:
            raise UnknownStateError(name) from None

    def name(self, index: int) -> str:
        """Return state name for an index."""

        if index < 0 or index >= len(self._names):
            raise IndexError(f"State index {index} out of range 0..{len(self._names) - 1}.")
        return self._names[index]

    def is_boundary(self, index: int) -> bool:
        """True for the start and end states."""

        return index == self.start or index == self.end
