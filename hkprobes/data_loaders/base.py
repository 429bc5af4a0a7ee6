"""
Base data loader class providing common functionality.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd


class DataLoader(ABC):
    """
    Abstract base class for data loaders.

    Provides common interface for loading different types of data
    (methylation matrices, probe annotations, gene lists).
    """

    def __init__(self, config: Optional[Any] = None):
        """
        Initialize data loader with configuration.

        Args:
            config: Configuration object whose ``base_dir`` anchors relative
                paths. If None, relative paths resolve against the current
                directory.
        """
        self.config = config
        self._cache: Dict[str, pd.DataFrame] = {}

    @abstractmethod
    def load(self, file_path: Union[str, Path], **kwargs) -> pd.DataFrame:
        """
        Load data from file.

        Args:
            file_path: Path to data file
            **kwargs: Additional loading parameters

        Returns:
            Loaded data as DataFrame
        """
        pass

    def _resolve_path(self, file_path: Union[str, Path]) -> Path:
        """Resolve file path relative to base directory if not absolute."""
        path = Path(file_path)
        if not path.is_absolute() and self.config is not None:
            path = Path(self.config.base_dir) / path
        return path

    def _validate_file(self, file_path: Path) -> None:
        """Validate that file exists and is readable."""
        if not file_path.exists():
            raise FileNotFoundError(f"Data file not found: {file_path}")
        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

    @staticmethod
    def _infer_separator(file_path: Path) -> str:
        """Tab for .tsv/.txt files, comma otherwise."""
        suffixes = [s.lower() for s in file_path.suffixes]
        if ".tsv" in suffixes or ".txt" in suffixes:
            return "\t"
        return ","
