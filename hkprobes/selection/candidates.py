"""
Candidate probe sets per dataset and region category.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Sequence, Tuple

import pandas as pd

from ..annotation import AnnotationIndex, RegionCategory
from ..data_loaders.dataset import MethylationDataset
from ..errors import ConfigurationError, ExclusionReason

logger = logging.getLogger(__name__)

DEFAULT_REGIONS: Tuple[RegionCategory, ...] = (RegionCategory.TSS, RegionCategory.BODY)


@dataclass(frozen=True)
class ExclusionReport:
    """Counts of probes left out of a dataset's candidate sets, by reason."""

    dataset: str
    n_probes: int
    counts: Mapping[ExclusionReason, int] = field(default_factory=dict)

    def count(self, reason: ExclusionReason) -> int:
        return self.counts.get(reason, 0)

    @property
    def n_excluded(self) -> int:
        return sum(self.counts.values())

    def to_frame(self) -> pd.DataFrame:
        """One-row summary table for reporting."""
        row = {"dataset": self.dataset, "n_probes": self.n_probes}
        row.update({reason.value: self.count(reason) for reason in ExclusionReason})
        return pd.DataFrame([row])


@dataclass(frozen=True)
class CandidateSets:
    """Housekeeping candidate probes of one dataset, keyed by region category."""

    dataset: str
    by_region: Mapping[RegionCategory, FrozenSet[str]]
    report: ExclusionReport

    def region(self, category: RegionCategory) -> FrozenSet[str]:
        return self.by_region.get(category, frozenset())

    @property
    def tss(self) -> FrozenSet[str]:
        return self.region(RegionCategory.TSS)

    @property
    def body(self) -> FrozenSet[str]:
        return self.region(RegionCategory.BODY)


class ProbeSetBuilder:
    """
    Build TSS and gene-body candidate sets for a dataset.

    A probe is a candidate for a region when it has no missing value in
    the dataset, its first region token classifies into that region, and
    one of its gene accessions is on the housekeeping list.
    """

    def __init__(self, region_categories: Sequence[RegionCategory] = DEFAULT_REGIONS):
        """
        Initialize builder.

        Args:
            region_categories: Categories to build sets for (TSS and/or Body)
        """
        regions = tuple(dict.fromkeys(region_categories))
        if not regions:
            raise ConfigurationError("At least one region category is required")
        if RegionCategory.OTHER in regions:
            raise ConfigurationError("Region category 'Other' cannot hold candidates")
        self.region_categories = regions

    def build(
        self,
        dataset: MethylationDataset,
        annotation: AnnotationIndex,
        gene_list: Iterable[str]
    ) -> CandidateSets:
        """
        Build candidate sets for one dataset.

        Args:
            dataset: Methylation matrix of a single dataset
            annotation: Probe annotation index
            gene_list: Housekeeping gene accessions

        Returns:
            CandidateSets with disjoint per-region probe sets
        """
        genes = frozenset(gene_list)
        incomplete = dataset.incomplete_probes()

        buckets: Dict[RegionCategory, set] = {region: set() for region in self.region_categories}
        counts = {reason: 0 for reason in ExclusionReason}
        counts[ExclusionReason.MISSING_DATA] = len(incomplete)

        for probe_id in dataset.probes:
            if probe_id in incomplete:
                continue
            if probe_id not in annotation:
                counts[ExclusionReason.UNANNOTATED] += 1
                continue
            region = annotation.resolve_region(probe_id)
            if region not in buckets:
                counts[ExclusionReason.OTHER_REGION] += 1
            elif not annotation.matches_housekeeping(probe_id, genes):
                counts[ExclusionReason.NOT_HOUSEKEEPING] += 1
            else:
                buckets[region].add(probe_id)

        report = ExclusionReport(
            dataset=dataset.name,
            n_probes=len(dataset.probes),
            counts=counts
        )
        by_region = {region: frozenset(probes) for region, probes in buckets.items()}

        logger.info(
            f"[{dataset.name}] excluded {counts[ExclusionReason.MISSING_DATA]} probes "
            f"with missing values, {counts[ExclusionReason.UNANNOTATED]} unannotated, "
            f"{counts[ExclusionReason.OTHER_REGION]} outside target regions"
        )
        for region, probes in by_region.items():
            logger.info(f"[{dataset.name}] {region.value} candidates: {len(probes)}")

        return CandidateSets(dataset=dataset.name, by_region=by_region, report=report)
