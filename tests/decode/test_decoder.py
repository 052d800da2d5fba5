import numpy as np
import pytest

from hmmpath.decode import decoder
from hmmpath.errors.types import DecodeError
from hmmpath.model.hmm import build_model
from hmmpath.model.observations import ExperimentData


def _obs(*symbols: int) -> ExperimentData:
    return ExperimentData.from_records((t, 0, s) for t, s in enumerate(symbols))


def _tied_model(names: list[str]):
    """Two interchangeable emitting states: every candidate ties."""
    a, b = names[1], names[2]
    return build_model(
        names,
        1,
        [
            (names[0], a, 0.5),
            (names[0], b, 0.5),
            (a, a, 0.5),
            (a, b, 0.5),
            (b, a, 0.5),
            (b, b, 0.5),
        ],
        [(a, 0, 1.0), (b, 0, 1.0)],
    )


def test_viterbi_determinism(weather_model) -> None:
    data = _obs(0, 1, 1, 0, 1, 0, 0)
    path1 = decoder.decode(weather_model, data)
    path2 = decoder.decode(weather_model, data)
    assert path1 == path2


def test_path_length_matches_observations(weather_model) -> None:
    for n in (1, 2, 5, 17):
        data = _obs(*([0, 1] * n)[:n])
        assert len(decoder.decode(weather_model, data)) == n


def test_hand_computed_weather_path(weather_model) -> None:
    result = decoder.viterbi(weather_model, _obs(0, 1, 1))

    assert result.path == [1, 2, 2]  # H L L
    assert result.path_probability == pytest.approx(0.062208)

    dp = result.trellis.sequence_probability
    assert dp[0].tolist() == pytest.approx([0.0, 0.54, 0.08, 0.0])
    assert dp[1].tolist() == pytest.approx([0.0, 0.0378, 0.1296, 0.0])
    assert dp[2].tolist() == pytest.approx([0.0, 0.005184, 0.062208, 0.0])
    assert result.trellis.back_pointer[2].tolist()[1:3] == [2, 2]
    assert result.trellis.back_pointer[1].tolist()[1:3] == [1, 1]


def test_decode_names(weather_model) -> None:
    assert decoder.decode_names(weather_model, _obs(0, 1, 1)) == ["H", "L", "L"]


def test_known_linear_path(linear_model) -> None:
    # path holds emitting steps only; start/end are implicit boundaries
    assert decoder.decode(linear_model, _obs(0)) == [linear_model.state_index("mid")]


def test_two_state_model_decodes_through_base_case() -> None:
    model = build_model(["start", "end"], 1, [("start", "end", 1.0)], [])
    result = decoder.viterbi(model, _obs(0))
    assert result.path == [0]
    assert result.path_probability == 0.0
    assert result.trellis.maxtime == 1


def test_tie_prefers_lowest_index_predecessor() -> None:
    model = _tied_model(["S", "X", "Y", "E"])
    result = decoder.viterbi(model, _obs(0, 0, 0))

    assert result.path == [1, 1, 1]
    # X and Y tie at every step; X (index 1) is kept as predecessor for both
    assert result.trellis.back_pointer[1].tolist()[1:3] == [1, 1]
    assert result.trellis.back_pointer[2].tolist()[1:3] == [1, 1]


def test_tie_break_follows_index_not_name() -> None:
    model = _tied_model(["S", "Y", "X", "E"])
    assert decoder.decode_names(model, _obs(0, 0)) == ["Y", "Y"]


def test_zero_probability_model_still_returns_full_path() -> None:
    model = build_model(["S", "M", "E"], 3, [], [])
    result = decoder.viterbi(model, _obs(0, 2, 1, 1))
    assert result.path == [0, 0, 0, 0]
    assert result.path_probability == 0.0
    assert not result.trellis.sequence_probability.any()


def test_empty_observations_raise_decode_error(weather_model) -> None:
    with pytest.raises(DecodeError, match="empty"):
        decoder.decode(weather_model, ExperimentData())


def test_symbol_outside_alphabet_raises(weather_model) -> None:
    with pytest.raises(DecodeError, match="outside alphabet"):
        decoder.decode(weather_model, _obs(0, 2))


def test_first_step_predecessor_is_none(weather_model) -> None:
    trellis = decoder.viterbi(weather_model, _obs(0, 1)).trellis
    assert trellis.predecessor(0, 1) is decoder.NO_PREDECESSOR
    assert trellis.back_pointer[0].tolist() == [0, 0, 0, 0]
    assert trellis.predecessor(1, 2) == 1


def test_trellis_is_read_only(weather_model) -> None:
    trellis = decoder.viterbi(weather_model, _obs(0)).trellis
    with pytest.raises(ValueError):
        trellis.sequence_probability[0, 0] = 1.0


def test_ground_truth_states_are_ignored(weather_model) -> None:
    a = ExperimentData.from_records([(0, 1, 0), (1, 1, 1)])
    b = ExperimentData.from_records([(5, 3, 0), (9, 0, 1)])
    assert decoder.decode(weather_model, a) == decoder.decode(weather_model, b)


def test_model_is_shared_read_only_across_decodes(weather_model) -> None:
    before = weather_model.transition_prob.copy()
    decoder.decode(weather_model, _obs(1, 1, 0))
    decoder.decode(weather_model, _obs(0))
    np.testing.assert_array_equal(weather_model.transition_prob, before)


def test_overflowing_products_never_pick_nan_predecessor() -> None:
    # probabilities above 1 are allowed; A's score overflows to inf and inf * 0 is NaN
    model = build_model(
        ["S", "A", "B", "E"],
        1,
        [("S", "A", 1e300), ("S", "B", 1e200), ("A", "A", 1.0), ("B", "B", 1.0)],
        [("A", 0, 1e300), ("B", 0, 1.0)],
    )
    result = decoder.viterbi(model, _obs(0, 0))

    assert result.path == [1, 1]
    assert result.trellis.back_pointer[1].tolist() == [0, 1, 2, 0]
    assert not np.isnan(result.trellis.sequence_probability[1]).any()
    assert result.trellis.sequence_probability[1, 2] == pytest.approx(1e200)
