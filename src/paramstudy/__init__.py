"""
paramstudy - Ensemble parameter studies.

Generate members, run your computation on each, write the results.
"""

from paramstudy.ensemble import Ensemble, Member, load
from paramstudy.errors import (
    DuplicateParameter,
    EnsembleError,
    InvalidCount,
    InvalidRange,
    InvalidSeed,
    KeyNotFound,
    LoadError,
    WriteError,
)
from paramstudy.models.spec import EnsembleType
from paramstudy.values import Input, Output, Settings
from paramstudy.writer import read_result, result_path_for

__version__ = "0.1.0"
__all__ = [
    "DuplicateParameter",
    "Ensemble",
    "EnsembleError",
    "EnsembleType",
    "Input",
    "InvalidCount",
    "InvalidRange",
    "InvalidSeed",
    "KeyNotFound",
    "LoadError",
    "Member",
    "Output",
    "Settings",
    "WriteError",
    "__version__",
    "load",
    "read_result",
    "result_path_for",
]
