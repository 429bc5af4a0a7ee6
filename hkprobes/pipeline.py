"""
Housekeeping probe selection pipeline.

Runs candidate building and variability filtering independently per
dataset, then combines all datasets in a single consensus step:

    datasets -> ProbeSetBuilder -> VariabilityFilter -> ConsensusSelector
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .annotation import AnnotationIndex, RegionCategory
from .data_loaders import AnnotationLoader, GeneListLoader, MethylationDataLoader, MethylationDataset
from .errors import ConfigurationError
from .selection import (
    CandidateSets,
    ConsensusResult,
    ConsensusSelector,
    ProbeSetBuilder,
    VariabilityFilter,
    VariabilityResult,
)
from .utils.config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """All per-dataset and consensus outputs of one run."""

    candidates: Dict[str, CandidateSets]
    variability: Dict[str, Dict[RegionCategory, VariabilityResult]]
    final: Dict[RegionCategory, ConsensusResult]

    def final_probes(self, region: RegionCategory) -> Tuple[str, ...]:
        """Ordered housekeeping probes of a region category."""
        return self.final[region].probes

    @property
    def empty_regions(self) -> List[RegionCategory]:
        return [region for region, result in self.final.items() if result.is_empty]

    def exclusion_summary(self) -> pd.DataFrame:
        """Exclusion counts and set sizes, one row per dataset."""
        rows = []
        for name, sets in self.candidates.items():
            row = sets.report.to_frame()
            for region, result in self.variability[name].items():
                row[f"{region.value}_candidates"] = len(sets.region(region))
                row[f"{region.value}_discarded"] = len(result.discard)
                row[f"{region.value}_threshold"] = result.threshold
            rows.append(row)
        return pd.concat(rows, ignore_index=True)


class HousekeepingPipeline:
    """
    Main pipeline class for housekeeping probe selection.

    Encapsulates all steps: input loading, candidate building,
    variability filtering and cross-dataset consensus.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize pipeline with configuration.

        Args:
            config: Pipeline configuration; defaults if None
        """
        self.config = config if config is not None else Config()
        self.builder = ProbeSetBuilder(self.config.region_categories)
        self.selector = ConsensusSelector()

    def variability_filter(self, dataset_name: str, region: RegionCategory) -> VariabilityFilter:
        """Filter configured for a dataset and region."""
        return VariabilityFilter(
            threshold=self.config.dataset_threshold(dataset_name, region),
            method=self.config.threshold_method
        )

    def process_dataset(
        self,
        dataset: MethylationDataset,
        annotation: AnnotationIndex,
        gene_list: Iterable[str]
    ) -> Tuple[CandidateSets, Dict[RegionCategory, VariabilityResult]]:
        """
        Build candidates and filter them for a single dataset.

        Args:
            dataset: Methylation dataset
            annotation: Probe annotation index
            gene_list: Housekeeping gene accessions

        Returns:
            Tuple of (candidate sets, region -> variability result)
        """
        logger.debug(f"Processing {dataset!r}")
        candidates = self.builder.build(dataset, annotation, gene_list)
        results = {
            region: self.variability_filter(dataset.name, region).filter(
                dataset, candidates.region(region), region=region
            )
            for region in self.config.region_categories
        }
        return candidates, results

    def run(
        self,
        datasets: Sequence[MethylationDataset],
        annotation: AnnotationIndex,
        gene_list: Iterable[str]
    ) -> PipelineResult:
        """
        Run the selection over all datasets.

        Args:
            datasets: Datasets with different cell-composition biases
            annotation: Probe annotation index
            gene_list: Housekeeping gene accessions

        Returns:
            PipelineResult with per-dataset sets and final probes

        Raises:
            ConfigurationError: If no dataset is supplied or names repeat
        """
        datasets = list(datasets)
        self._validate_datasets(datasets)
        genes = frozenset(gene_list)

        logger.info(
            f"Selecting housekeeping probes across {len(datasets)} datasets "
            f"({len(genes)} housekeeping genes, method={self.config.threshold_method})"
        )

        if self.config.n_jobs > 1 and len(datasets) > 1:
            with ThreadPoolExecutor(max_workers=self.config.n_jobs) as executor:
                outputs = list(executor.map(
                    lambda d: self.process_dataset(d, annotation, genes), datasets
                ))
        else:
            outputs = [self.process_dataset(d, annotation, genes) for d in datasets]

        candidates = {d.name: out[0] for d, out in zip(datasets, outputs)}
        variability = {d.name: out[1] for d, out in zip(datasets, outputs)}

        final = self.selector.select_all(candidates, variability, self.config.region_categories)
        for region, result in final.items():
            logger.info(f"Final {region.value} housekeeping probes: {len(result)}")

        return PipelineResult(candidates=candidates, variability=variability, final=final)

    @staticmethod
    def _validate_datasets(datasets: List[MethylationDataset]) -> None:
        if not datasets:
            raise ConfigurationError("At least one dataset must be supplied")
        names = [d.name for d in datasets]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate dataset names: {duplicates}")

    def load_inputs(self) -> Tuple[List[MethylationDataset], AnnotationIndex, Tuple[str, ...]]:
        """
        Load datasets, annotation and gene list named in the configuration.

        Returns:
            Tuple of (datasets, annotation index, gene list)
        """
        if not self.config.datasets:
            raise ConfigurationError("No datasets configured")

        ann = self.config.annotation
        annotation = AnnotationLoader(self.config).load_index(
            self.config.get_data_path("annotation"),
            probe_col=ann["probe_col"],
            region_col=ann["region_col"],
            accession_col=ann["accession_col"],
            skiprows=ann["skiprows"]
        )

        genes = GeneListLoader(self.config).load_genes(
            self.config.get_data_path("gene_list"),
            column=self.config.gene_list["column"],
            header=self.config.gene_list["header"]
        )

        meth_loader = MethylationDataLoader(self.config)
        datasets = []
        for spec in self.config.datasets:
            if not spec.get("file"):
                raise ConfigurationError(f"Dataset {spec['name']!r} has no 'file'")
            datasets.append(meth_loader.load_dataset(
                spec["name"],
                spec["file"],
                samples=spec.get("samples"),
                na_values=spec.get("na_values")
            ))

        return datasets, annotation, genes
