"""
Per-probe variability scoring and threshold filtering.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Optional

import numpy as np
import pandas as pd
from scipy.signal import find_peaks
from scipy.stats import gaussian_kde

from ..annotation import RegionCategory
from ..data_loaders.dataset import MethylationDataset
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.05
# Scores this close to the threshold count as ties and are retained.
TIE_TOLERANCE = 1e-12
THRESHOLD_METHODS = ("fixed", "density")


def validate_threshold(value: Any, name: str = "threshold") -> float:
    """
    Check that a threshold is a non-negative real number.

    Raises:
        ConfigurationError: If the value is non-numeric, NaN or negative
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value) or value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")
    return value


def density_threshold(
    scores: pd.Series,
    fallback: float = DEFAULT_THRESHOLD,
    grid_size: int = 512
) -> float:
    """
    Cutoff at the first density valley to the right of the main mode.

    The density of standard deviations is estimated with a Gaussian KDE.
    When the scores are too few or too uniform to show a valley, the
    fixed ``fallback`` is returned.

    Args:
        scores: Per-probe standard deviations
        fallback: Threshold used when no valley is found
        grid_size: Number of evaluation points for the density

    Returns:
        Threshold value
    """
    values = np.asarray(scores.dropna(), dtype=float)
    if np.unique(values).size < 3:
        logger.warning(
            f"Too few distinct scores ({np.unique(values).size}) for a density "
            f"threshold; using {fallback}"
        )
        return fallback

    try:
        kde = gaussian_kde(values)
    except np.linalg.LinAlgError:
        logger.warning(f"Degenerate score density; using {fallback}")
        return fallback

    grid = np.linspace(values.min(), values.max(), grid_size)
    density = kde(grid)
    mode = int(np.argmax(density))

    valleys, _ = find_peaks(-density)
    valleys = valleys[valleys > mode]
    if valleys.size == 0:
        logger.warning(f"No density valley above the mode; using {fallback}")
        return fallback

    cutoff = float(grid[valleys[0]])
    logger.debug(f"Density valley threshold: {cutoff:.4f} (mode at {grid[mode]:.4f})")
    return cutoff


@dataclass(frozen=True, eq=False)
class VariabilityResult:
    """Retain/discard partition of one dataset's candidates for one region."""

    dataset: str
    region: Optional[RegionCategory]
    threshold: float
    scores: pd.Series
    means: pd.Series
    retain: FrozenSet[str]
    discard: FrozenSet[str]

    def to_frame(self) -> pd.DataFrame:
        """
        Score table sorted by mean methylation.

        The ordering is for display; it plays no part in the partition.
        """
        df = pd.DataFrame({
            "probe_id": self.scores.index,
            "mean": self.means.reindex(self.scores.index).to_numpy(),
            "sd": self.scores.to_numpy(),
        })
        df["discarded"] = df["probe_id"].isin(self.discard)
        return df.sort_values(["mean", "probe_id"]).reset_index(drop=True)


class VariabilityFilter:
    """
    Partition candidate probes by cross-sample standard deviation.

    A probe is discarded iff its sample standard deviation (ddof=1) is
    strictly greater than the threshold; a score equal to the threshold,
    up to floating-point rounding, is retained. With ``method="density"``
    the threshold is derived per call from the scores themselves, falling
    back to the fixed value.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, method: str = "fixed"):
        """
        Initialize filter.

        Args:
            threshold: Maximum acceptable standard deviation (fixed method),
                also the fallback for the density method
            method: "fixed" or "density"
        """
        if method not in THRESHOLD_METHODS:
            raise ConfigurationError(
                f"Unknown threshold method {method!r}, expected one of {THRESHOLD_METHODS}"
            )
        self.threshold = validate_threshold(threshold)
        self.method = method

    def score(self, dataset: MethylationDataset, candidates: Iterable[str]) -> pd.Series:
        """Sample standard deviation of each candidate probe, sorted by probe id."""
        probes = sorted(candidates)
        if probes and dataset.n_samples < 2:
            raise ConfigurationError(
                f"Dataset {dataset.name!r} has {dataset.n_samples} sample(s); "
                "at least 2 are needed to score variability"
            )
        return dataset.values_for(probes).std(axis=0, ddof=1).astype(float)

    def threshold_for(self, scores: pd.Series) -> float:
        """Threshold to apply to a given score vector."""
        if self.method == "density":
            return density_threshold(scores, fallback=self.threshold)
        return self.threshold

    def filter(
        self,
        dataset: MethylationDataset,
        candidates: Iterable[str],
        region: Optional[RegionCategory] = None
    ) -> VariabilityResult:
        """
        Split candidates into retained and discarded probes.

        Args:
            dataset: Dataset whose samples are scored
            candidates: Candidate probes, all complete in ``dataset``
            region: Region category, recorded on the result

        Returns:
            VariabilityResult with scores and the partition
        """
        scores = self.score(dataset, candidates)
        means = dataset.values_for(scores.index).mean(axis=0)
        threshold = self.threshold_for(scores)

        tie = np.isclose(scores.to_numpy(), threshold, rtol=0, atol=TIE_TOLERANCE)
        discard_mask = (scores > threshold).to_numpy() & ~tie
        discard = frozenset(scores.index[discard_mask])
        retain = frozenset(scores.index[~discard_mask])

        label = region.value if region is not None else "all"
        logger.info(
            f"[{dataset.name}] {label}: retained {len(retain)}, "
            f"discarded {len(discard)} (sd > {threshold:.4f})"
        )

        return VariabilityResult(
            dataset=dataset.name,
            region=region,
            threshold=threshold,
            scores=scores,
            means=means,
            retain=retain,
            discard=discard
        )
