"""
Methylation data loader for per-dataset beta value matrices.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .base import DataLoader
from .dataset import MethylationDataset

logger = logging.getLogger(__name__)


class MethylationDataLoader(DataLoader):
    """
    Load methylation matrices from GEO-style processed files.

    Handles:
    - Probes as rows in the file, samples as rows in memory (transpose)
    - Sample name normalization (X prefix handling)
    - Sample and probe subsetting
    - Custom missing-value markers
    """

    def load(
        self,
        file_path: Union[str, Path],
        sample_filter: Optional[List[str]] = None,
        handle_x_prefix: bool = True,
        na_values: Optional[Sequence[str]] = None,
        **kwargs
    ) -> pd.DataFrame:
        """
        Load methylation data from a delimited file.

        Args:
            file_path: Path to methylation matrix (probes x samples)
            sample_filter: Optional list of sample IDs to keep
            handle_x_prefix: Handle X prefix in column names
            na_values: Extra strings to read as missing

        Returns:
            DataFrame with samples as rows and probes as columns
        """
        path = self._resolve_path(file_path)
        self._validate_file(path)

        cache_key = f"{path}|{tuple(na_values or ())}"
        if cache_key in self._cache:
            logger.debug(f"Loading from cache: {path.name}")
            df = self._cache[cache_key].copy()
        else:
            logger.info(f"Loading methylation data from {path.name}...")
            df = pd.read_csv(
                path,
                sep=self._infer_separator(path),
                index_col=0,
                na_values=list(na_values) if na_values else None
            )
            df.index = df.index.astype(str)
            df.columns = df.columns.astype(str)
            df = df.apply(pd.to_numeric, errors="coerce")
            self._cache[cache_key] = df.copy()

        # Handle X prefix in column names (R adds X to numeric column names)
        if handle_x_prefix:
            df = self._normalize_column_names(df)

        # Standard format: samples as rows
        df = df.T
        df.index.name = "sample_id"

        # Filter samples
        if sample_filter is not None:
            available_samples = [s for s in sample_filter if s in df.index]
            missing = len(sample_filter) - len(available_samples)
            if missing:
                logger.warning(f"{missing} requested samples not found in {path.name}")
            df = df.loc[available_samples]
            logger.info(f"Filtered to {len(available_samples)} samples")

        self._check_range(df, path.name)

        logger.info(f"Loaded {df.shape[0]} samples x {df.shape[1]} probes")
        return df

    def load_dataset(
        self,
        name: str,
        file_path: Union[str, Path],
        samples: Optional[List[str]] = None,
        **kwargs
    ) -> MethylationDataset:
        """
        Load a named dataset ready for the selection pipeline.

        Args:
            name: Dataset name (e.g., GEO accession)
            file_path: Path to methylation matrix (probes x samples)
            samples: Samples to consider; all samples if None

        Returns:
            MethylationDataset with samples as rows
        """
        betas = self.load(file_path, sample_filter=samples, **kwargs)
        return MethylationDataset(name=name, betas=betas)

    def _normalize_column_names(self, df: pd.DataFrame) -> pd.DataFrame:
        """Remove X prefix from column names if present."""
        new_cols = []
        for col in df.columns:
            if col.startswith('X') and col[1:].replace('_', '').replace('R', '').replace('C', '').isdigit():
                new_cols.append(col[1:])
            else:
                new_cols.append(col)
        df.columns = new_cols
        return df

    @staticmethod
    def _check_range(df: pd.DataFrame, source: str) -> None:
        """Warn about values outside the beta value range [0, 1]."""
        values = df.to_numpy(dtype=float)
        out_of_range = int(np.sum((values < 0) | (values > 1)))
        if out_of_range:
            logger.warning(
                f"{out_of_range} values outside [0, 1] in {source}; "
                "expected beta values"
            )
