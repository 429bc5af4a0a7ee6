"""
Housekeeping gene list loader.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

import pandas as pd

from ..errors import ConfigurationError
from .base import DataLoader

logger = logging.getLogger(__name__)


class GeneListLoader(DataLoader):
    """Load a single-column list of gene accession identifiers."""

    def load(
        self,
        file_path: Union[str, Path],
        column: int = 0,
        header: bool = False,
        **kwargs
    ) -> pd.DataFrame:
        """
        Load the gene list table.

        Args:
            file_path: Path to gene list (whitespace separated)
            column: Position of the accession column
            header: Whether the first line is a header

        Returns:
            DataFrame with a single ``accession`` column
        """
        path = self._resolve_path(file_path)
        self._validate_file(path)

        logger.info(f"Loading housekeeping gene list from {path.name}...")
        df = pd.read_csv(
            path,
            sep=r"\s+",
            header=0 if header else None,
            dtype=str,
            skip_blank_lines=True
        )

        if column >= df.shape[1]:
            raise ConfigurationError(
                f"Gene list {path.name} has {df.shape[1]} columns, "
                f"column {column} requested"
            )

        genes = df.iloc[:, column].dropna().str.strip()
        genes = genes[genes != ""]
        return pd.DataFrame({"accession": genes.to_numpy()})

    def get_gene_list(self, df: pd.DataFrame) -> Tuple[str, ...]:
        """
        Ordered, de-duplicated gene accessions.

        Args:
            df: Output of ``load``

        Returns:
            Immutable tuple in first-seen order
        """
        genes = tuple(dict.fromkeys(df["accession"].tolist()))
        dropped = len(df) - len(genes)
        if dropped:
            logger.info(f"Dropped {dropped} duplicated gene accessions")
        logger.info(f"Housekeeping gene list has {len(genes)} accessions")
        return genes

    def load_genes(self, file_path: Union[str, Path], column: int = 0, header: bool = False) -> Tuple[str, ...]:
        """Load and return the ordered gene accession tuple."""
        return self.get_gene_list(self.load(file_path, column=column, header=header))
