"""hmmpath: most-probable-path decoding for left-to-right discrete HMMs."""

from hmmpath.version import __version__
from hmmpath.model.hmm import Model, build_model
from hmmpath.model.observations import ExperimentData, Observation
from hmmpath.decode.decoder import decode, viterbi

__all__ = [
    "__version__",
    "Model",
    "build_model",
    "ExperimentData",
    "Observation",
    "decode",
    "viterbi",
]
