"""
Immutable per-dataset methylation matrix.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, List

import pandas as pd

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MethylationDataset:
    """
    Named methylation matrix with samples as rows and probes as columns.

    Values are beta values (methylation fractions) or NaN for missing.
    The pipeline only reads ``betas``; every derived object is a new value.
    """

    name: str
    betas: pd.DataFrame

    def __post_init__(self):
        duplicated = self.betas.columns[self.betas.columns.duplicated()]
        if len(duplicated) > 0:
            raise ConfigurationError(
                f"Dataset {self.name!r} has duplicated probe ids: "
                f"{sorted(set(map(str, duplicated)))[:5]}"
            )

    @property
    def probes(self) -> List[str]:
        return [str(p) for p in self.betas.columns]

    @property
    def n_samples(self) -> int:
        return self.betas.shape[0]

    def incomplete_probes(self) -> FrozenSet[str]:
        """Probes with at least one missing value across this dataset's samples."""
        missing = self.betas.isna().any(axis=0)
        return frozenset(str(p) for p in missing[missing].index)

    def values_for(self, probe_ids) -> pd.DataFrame:
        """Sub-matrix for the given probes, in the given order."""
        return self.betas.loc[:, list(probe_ids)]

    def __repr__(self) -> str:
        return (
            f"MethylationDataset(name='{self.name}', "
            f"samples={self.betas.shape[0]}, probes={self.betas.shape[1]})"
        )
