"""
Housekeeping Probe Selection

Identifies DNA methylation array probes that stay invariant across
datasets with different cell-type composition, for use as reference
anchors by a downstream normalization routine.
"""

from .annotation import AnnotationIndex, RegionCategory
from .errors import ConfigurationError, EmptyIntersectionWarning, ExclusionReason
from .selection import ConsensusSelector, ProbeSetBuilder, VariabilityFilter

__version__ = "1.0.0"

__all__ = [
    "AnnotationIndex",
    "RegionCategory",
    "ConfigurationError",
    "EmptyIntersectionWarning",
    "ExclusionReason",
    "ProbeSetBuilder",
    "VariabilityFilter",
    "ConsensusSelector",
]
