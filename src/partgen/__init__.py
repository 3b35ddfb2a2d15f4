"""Public package interface for partgen."""

from importlib.metadata import PackageNotFoundError, version

from .api.models import SampleResult, SamplerConfig
from .api.sampler import IntegerPartition, PartitionSampler, generate
from .engine.errors import (
    PartitionError,
    SamplingBudgetExceeded,
    TiltConvergenceError,
)
from .engine.partition import Partition
from .engine.sampling import (
    sample_exact,
    sample_exact_by_pdc,
    sample_exact_by_rejection,
    sample_expected_size,
)
from .engine.tilt import TiltSolution, expected_sum, find_tilt, solve_tilt
from .schema.policies import (
    Custom,
    Even,
    MaxPart,
    MinPart,
    Odd,
    Powers,
    Residue,
    RestrictionPolicy,
    Triangular,
    Unrestricted,
    available_policies,
    get_policy,
    load_policy,
)

try:
    __version__ = version("partgen")
except PackageNotFoundError:
    __version__ = "0.1.0"


__all__ = [
    "Custom",
    "Even",
    "IntegerPartition",
    "MaxPart",
    "MinPart",
    "Odd",
    "Partition",
    "PartitionError",
    "PartitionSampler",
    "Powers",
    "Residue",
    "RestrictionPolicy",
    "SampleResult",
    "SamplerConfig",
    "SamplingBudgetExceeded",
    "TiltConvergenceError",
    "TiltSolution",
    "Triangular",
    "Unrestricted",
    "available_policies",
    "expected_sum",
    "find_tilt",
    "generate",
    "get_policy",
    "load_policy",
    "sample_exact",
    "sample_exact_by_pdc",
    "sample_exact_by_rejection",
    "sample_expected_size",
    "solve_tilt",
]
