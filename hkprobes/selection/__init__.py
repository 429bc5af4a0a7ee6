"""
Probe selection modules: candidate sets, variability filtering and
cross-dataset consensus.
"""

from .candidates import CandidateSets, ExclusionReport, ProbeSetBuilder
from .consensus import ConsensusResult, ConsensusSelector
from .variability import (
    DEFAULT_THRESHOLD,
    THRESHOLD_METHODS,
    VariabilityFilter,
    VariabilityResult,
    density_threshold,
    validate_threshold,
)

__all__ = [
    "CandidateSets",
    "ExclusionReport",
    "ProbeSetBuilder",
    "ConsensusResult",
    "ConsensusSelector",
    "DEFAULT_THRESHOLD",
    "THRESHOLD_METHODS",
    "VariabilityFilter",
    "VariabilityResult",
    "density_threshold",
    "validate_threshold",
]
