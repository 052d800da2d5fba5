"""HMM model representation and observation records."""

from .state_space import START_STATE, StateSpace
from .hmm import Model, build_model
from .observations import ExperimentData, Observation

__all__ = ["START_STATE", "StateSpace", "Model", "build_model", "ExperimentData", "Observation"]
