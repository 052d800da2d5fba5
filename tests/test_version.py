import re

import hmmpath
from hmmpath import version


def test_version_string_is_semverish() -> None:
    assert isinstance(version.__version__, str)
    assert re.fullmatch(r"\d+\.\d+\.\d+([.-][0-9A-Za-z.]+)?", version.__version__) is not None


def test_package_exports_version_and_core_api() -> None:
    assert hmmpath.__version__ == version.__version__
    for name in ("build_model", "decode", "viterbi", "Model", "ExperimentData"):
        assert hasattr(hmmpath, name)
