"""
Plain-text reader for model descriptions and observation sequences.

Both formats are whitespace-separated token streams; line breaks carry no meaning.

Model::

    <nstates> <name_0> ... <name_{n-1}>
    <alphabet_size>
    <ntransitions> (<from> <to> <prob>) ...
    <nemissions> (<state> <symbol> <prob>) ...

Observations::

    <nsteps> (<step> <state_name> <symbol>) ...

Symbols are single lowercase letters, ``a`` being symbol 0.
"""

from __future__ import annotations

import string
from pathlib import Path
from typing import Callable, Iterator, List, TextIO, Tuple, TypeVar

from hmmpath.errors.types import FormatError
from hmmpath.model.hmm import EmissionSpec, Model, TransitionSpec, build_model
from hmmpath.model.observations import ExperimentData

T = TypeVar("T")

ALPHABET: str = string.ascii_lowercase


def symbol_to_index(symbol: str) -> int:
    """Map a one-letter symbol to its index (``'a'`` -> 0)."""

    if len(symbol) != 1 or symbol not in ALPHABET:
        raise FormatError(f"Symbol must be a single lowercase letter, got {symbol!r}")
    return ord(symbol) - ord("a")


def index_to_symbol(index: int) -> str:
    if index < 0 or index >= len(ALPHABET):
        raise FormatError(f"Symbol index {index} out of range 0..{len(ALPHABET) - 1}")
    return ALPHABET[index]


class _Tokens:
    """Cursor over whitespace-separated tokens with positional error messages."""

    def __init__(self, text: str, *, source: str) -> None:
        self._tokens = text.split()
        self._pos = 0
        self._source = source

    def next(self, what: str) -> str:
        if self._pos >= len(self._tokens):
            raise FormatError(f"{self._source}: unexpected end of input, expected {what}")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def parse(self, what: str, convert: Callable[[str], T]) -> T:
        position = self._pos + 1
        token = self.next(what)
        try:
            return convert(token)
        except ValueError as exc:
            raise FormatError(f"{self._source}: token {position} ({token!r}) is not a valid {what}: {exc}") from exc

    def count(self, what: str) -> int:
        value = self.parse(what, int)
        if value < 0:
            raise FormatError(f"{self._source}: {what} must be non-negative, got {value}")
        return value


def _source_name(stream: TextIO) -> str:
    return str(getattr(stream, "name", "<stream>"))


def read_model(stream: TextIO) -> Model:
    """
    Read and validate a model description.

    Raises
    ------
    FormatError
        Truncated input or a token of the wrong kind.
    ValidationError
        The description parses but violates the model rules.
    """

    tokens = _Tokens(stream.read(), source=_source_name(stream))

    n_states = tokens.count("state count")
    names = [tokens.next(f"state name #{i}") for i in range(n_states)]
    alphabet_size = tokens.count("alphabet size")

    transitions: List[TransitionSpec] = []
    for _ in range(tokens.count("transition count")):
        src = tokens.next("transition source state")
        dst = tokens.next("transition target state")
        transitions.append((src, dst, tokens.parse("transition probability", float)))

    emissions: List[EmissionSpec] = []
    for _ in range(tokens.count("emission count")):
        state = tokens.next("emitting state")
        symbol = tokens.parse("emission symbol", symbol_to_index)
        emissions.append((state, symbol, tokens.parse("emission probability", float)))

    return build_model(names, alphabet_size, transitions, emissions)


def _iter_observation_records(tokens: _Tokens) -> Iterator[Tuple[int, str, int]]:
    for _ in range(tokens.count("step count")):
        step = tokens.parse("step number", int)
        name = tokens.next("state name")
        yield step, name, tokens.parse("observed symbol", symbol_to_index)


def read_experiment_data(model: Model, stream: TextIO) -> ExperimentData:
    """
    Read an observation sequence, resolving ground-truth state names through ``model``.

    An unknown state name raises ``UnknownStateError`` (a ``LookupError``).
    """

    tokens = _Tokens(stream.read(), source=_source_name(stream))
    return ExperimentData.from_named(model, _iter_observation_records(tokens))


def load_model(path: Path) -> Model:
    with Path(path).open("r", encoding="utf-8") as f:
        return read_model(f)


def load_experiment_data(model: Model, path: Path) -> ExperimentData:
    with Path(path).open("r", encoding="utf-8") as f:
        return read_experiment_data(model, f)
