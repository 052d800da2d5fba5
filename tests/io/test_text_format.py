import io
from pathlib import Path

import pytest

from hmmpath.errors.types import (
    ForbiddenEmissionError,
    ForbiddenTransitionError,
    FormatError,
    UnknownStateError,
)
from hmmpath.io.text_format import (
    index_to_symbol,
    load_experiment_data,
    load_model,
    read_experiment_data,
    read_model,
    symbol_to_index,
)


def test_symbol_mapping() -> None:
    assert symbol_to_index("a") == 0
    assert symbol_to_index("z") == 25
    assert index_to_symbol(2) == "c"
    for bad in ("", "A", "ab", "1"):
        with pytest.raises(FormatError):
            symbol_to_index(bad)
    with pytest.raises(FormatError):
        index_to_symbol(26)


def test_read_model_matches_description(weather_model_text: str) -> None:
    model = read_model(io.StringIO(weather_model_text))
    assert model.states.names == ("S", "H", "L", "E")
    assert model.alphabet_size == 2
    assert model.transition_prob[1, 2] == 0.3
    assert model.emission_prob[2].tolist() == [0.2, 0.8]


def test_line_breaks_are_not_significant() -> None:
    text = "3 s m e 1 2 s m 1 m e 1.0 1 m a 1"
    model = read_model(io.StringIO(text))
    assert model.transition_prob[1, 2] == 1.0
    assert model.emission_prob[1, 0] == 1.0


def test_read_experiment_data(weather_model, weather_data_text: str) -> None:
    data = read_experiment_data(weather_model, io.StringIO(weather_data_text))
    assert data.symbols().tolist() == [0, 1, 1]
    assert data.true_states() == [1, 2, 2]
    assert [obs.step for obs in data] == [0, 1, 2]


def test_load_from_files(weather_files: tuple[Path, Path]) -> None:
    model_path, data_path = weather_files
    model = load_model(model_path)
    data = load_experiment_data(model, data_path)
    assert len(data) == 3


def test_truncated_model_reports_missing_token() -> None:
    with pytest.raises(FormatError, match="unexpected end of input, expected transition probability"):
        read_model(io.StringIO("3 s m e 1 1 s m"))


def test_non_numeric_count_rejected() -> None:
    with pytest.raises(FormatError, match="token 1 .*'three'.* state count"):
        read_model(io.StringIO("three s m e"))


def test_negative_count_rejected() -> None:
    with pytest.raises(FormatError, match="non-negative"):
        read_model(io.StringIO("3 s m e 1 -1"))


def test_bad_symbol_token_rejected() -> None:
    with pytest.raises(FormatError, match="emission symbol"):
        read_model(io.StringIO("3 s m e 1 0 1 m XY 1.0"))


def test_model_rules_enforced_while_reading() -> None:
    with pytest.raises(ForbiddenTransitionError):
        read_model(io.StringIO("3 s m e 1 1 e m 0.5 0"))
    with pytest.raises(ForbiddenTransitionError):
        read_model(io.StringIO("3 s m e 1 1 m s 0.5 0"))
    with pytest.raises(ForbiddenEmissionError):
        read_model(io.StringIO("3 s m e 1 0 1 s a 0.5"))
    with pytest.raises(UnknownStateError):
        read_model(io.StringIO("3 s m e 1 1 s x 0.5 0"))


def test_unknown_ground_truth_state_is_lookup_error(weather_model) -> None:
    with pytest.raises(LookupError, match="fog"):
        read_experiment_data(weather_model, io.StringIO("2 0 H a 1 fog b"))
