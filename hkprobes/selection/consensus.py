"""
Cross-dataset consensus of housekeeping probes.

Datasets are chosen with different, known cell-composition biases. A
probe is kept only if it is a candidate in every dataset and was flagged
as variable in none, so the surviving probes are invariant to mixture
composition rather than quiet in a single biological context.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping, Optional, Sequence, Tuple

from ..annotation import RegionCategory
from ..errors import ConfigurationError, EmptyIntersectionWarning
from .candidates import CandidateSets
from .variability import VariabilityResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsensusResult:
    """Final housekeeping probes of one region category."""

    region: Optional[RegionCategory]
    datasets: Tuple[str, ...]
    candidates: FrozenSet[str]
    discarded: FrozenSet[str]
    probes: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.probes

    def __len__(self) -> int:
        return len(self.probes)


class ConsensusSelector:
    """Intersect candidate sets and subtract the union of discard sets."""

    def select_final(
        self,
        candidate_sets: Mapping[str, FrozenSet[str]],
        discard_sets: Mapping[str, FrozenSet[str]],
        region: Optional[RegionCategory] = None
    ) -> ConsensusResult:
        """
        Combine per-dataset sets for one region category.

        Args:
            candidate_sets: Dataset name -> candidate probes
            discard_sets: Dataset name -> probes flagged as variable
            region: Region category, used for reporting

        Returns:
            ConsensusResult with probes sorted by identifier

        Raises:
            ConfigurationError: If no dataset is given or the two mappings
                name different datasets
        """
        if not candidate_sets:
            raise ConfigurationError("At least one dataset is required for consensus")
        if set(candidate_sets) != set(discard_sets):
            raise ConfigurationError(
                f"Candidate datasets {sorted(candidate_sets)} do not match "
                f"discard datasets {sorted(discard_sets)}"
            )

        names = tuple(candidate_sets)
        label = region.value if region is not None else "all"

        common = frozenset.intersection(*(frozenset(candidate_sets[n]) for n in names))
        discarded = frozenset().union(*(discard_sets[n] for n in names))

        if not common:
            message = (
                f"No {label} probe is a candidate in all datasets {list(names)}; "
                "final set is empty"
            )
            logger.warning(message)
            warnings.warn(message, EmptyIntersectionWarning, stacklevel=2)

        probes = tuple(sorted(common - discarded))
        logger.info(
            f"{label}: {len(common)} shared candidates, "
            f"{len(common & discarded)} discarded in at least one dataset, "
            f"{len(probes)} final"
        )
        if common and not probes:
            logger.warning(f"Every shared {label} candidate was discarded")

        return ConsensusResult(
            region=region,
            datasets=names,
            candidates=common,
            discarded=discarded,
            probes=probes
        )

    def select_all(
        self,
        candidates: Mapping[str, CandidateSets],
        variability: Mapping[str, Mapping[RegionCategory, VariabilityResult]],
        regions: Sequence[RegionCategory]
    ) -> Dict[RegionCategory, ConsensusResult]:
        """
        Run the consensus independently for each region category.

        Args:
            candidates: Dataset name -> CandidateSets
            variability: Dataset name -> region -> VariabilityResult
            regions: Region categories to combine

        Returns:
            Region -> ConsensusResult
        """
        results = {}
        for region in regions:
            candidate_sets = {name: sets.region(region) for name, sets in candidates.items()}
            discard_sets = {
                name: by_region[region].discard for name, by_region in variability.items()
            }
            results[region] = self.select_final(candidate_sets, discard_sets, region=region)
        return results
