"""
Error taxonomy for housekeeping probe selection.

Only configuration problems abort a run. Per-probe anomalies are absorbed
as exclusions and counted by reason.
"""

from enum import Enum


class ConfigurationError(ValueError):
    """Invalid run configuration; raised before any computation starts."""


class EmptyIntersectionWarning(UserWarning):
    """No probe is a candidate in every dataset for a region category."""


class ExclusionReason(str, Enum):
    """Why a probe was left out of a dataset's candidate sets."""

    MISSING_DATA = "missing_data"
    UNANNOTATED = "unannotated"
    OTHER_REGION = "other_region"
    NOT_HOUSEKEEPING = "not_housekeeping"
