from __future__ import annotations

from pathlib import Path

import pytest

from hmmpath.model.hmm import Model, build_model

WEATHER_MODEL_TEXT = """\
4 S H L E
2
6
S H 0.6
S L 0.4
H H 0.7
H L 0.3
L H 0.4
L L 0.6
4
H a 0.9
H b 0.1
L a 0.2
L b 0.8
"""

WEATHER_DATA_TEXT = """\
3
0 H a
1 L b
2 L b
"""


@pytest.fixture
def weather_model() -> Model:
    """Two emitting states, H favors symbol 0 and L favors symbol 1."""
    return build_model(
        ["S", "H", "L", "E"],
        2,
        [
            ("S", "H", 0.6),
            ("S", "L", 0.4),
            ("H", "H", 0.7),
            ("H", "L", 0.3),
            ("L", "H", 0.4),
            ("L", "L", 0.6),
        ],
        [("H", 0, 0.9), ("H", 1, 0.1), ("L", 0, 0.2), ("L", 1, 0.8)],
    )


@pytest.fixture
def linear_model() -> Model:
    """start -> mid -> end, mid always emits symbol 0."""
    return build_model(
        ["start", "mid", "end"],
        26,
        [("start", "mid", 1.0), ("mid", "end", 1.0)],
        [("mid", 0, 1.0)],
    )


@pytest.fixture
def weather_files(tmp_path: Path) -> tuple[Path, Path]:
    model_path = tmp_path / "weather.hmm"
    data_path = tmp_path / "weather_obs.txt"
    model_path.write_text(WEATHER_MODEL_TEXT, encoding="utf-8")
    data_path.write_text(WEATHER_DATA_TEXT, encoding="utf-8")
    return model_path, data_path


@pytest.fixture
def weather_model_text() -> str:
    return WEATHER_MODEL_TEXT


@pytest.fixture
def weather_data_text() -> str:
    return WEATHER_DATA_TEXT
