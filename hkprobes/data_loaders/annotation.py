"""
Probe annotation loader for Illumina-style manifests.
"""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from ..annotation import AnnotationIndex
from ..errors import ConfigurationError
from .base import DataLoader

logger = logging.getLogger(__name__)


class AnnotationLoader(DataLoader):
    """
    Load probe annotation tables.

    Only the probe id, region group and gene accession columns are kept;
    the rest of the manifest is not needed for probe selection.
    """

    def load(
        self,
        file_path: Union[str, Path],
        probe_col: str = "IlmnID",
        region_col: str = "UCSC_RefGene_Group",
        accession_col: str = "UCSC_RefGene_Accession",
        skiprows: int = 0,
        **kwargs
    ) -> pd.DataFrame:
        """
        Load annotation from a delimited file.

        Args:
            file_path: Path to annotation manifest
            probe_col: Column with probe identifiers
            region_col: Column with the region group field
            accession_col: Column with the gene accession field
            skiprows: Header lines to skip (Illumina manifests have 7)

        Returns:
            DataFrame indexed by probe id with region and accession columns
        """
        path = self._resolve_path(file_path)
        self._validate_file(path)

        logger.info(f"Loading probe annotation from {path.name}...")
        df = pd.read_csv(
            path,
            sep=self._infer_separator(path),
            skiprows=skiprows,
            dtype=str,
            low_memory=False
        )

        missing = [c for c in (probe_col, region_col, accession_col) if c not in df.columns]
        if missing:
            raise ConfigurationError(
                f"Annotation file {path.name} lacks columns: {missing}"
            )

        df = df[[probe_col, region_col, accession_col]].dropna(subset=[probe_col])
        df = df.drop_duplicates(subset=[probe_col], keep="first").set_index(probe_col)

        logger.info(f"Loaded annotation for {len(df)} probes")
        return df

    def load_index(
        self,
        file_path: Union[str, Path],
        probe_col: str = "IlmnID",
        region_col: str = "UCSC_RefGene_Group",
        accession_col: str = "UCSC_RefGene_Accession",
        skiprows: int = 0
    ) -> AnnotationIndex:
        """Load an annotation file straight into an AnnotationIndex."""
        df = self.load(
            file_path,
            probe_col=probe_col,
            region_col=region_col,
            accession_col=accession_col,
            skiprows=skiprows
        )
        return AnnotationIndex.from_frame(df, region_col=region_col, accession_col=accession_col)
