"""
Data loading modules for housekeeping probe selection.

This module provides loaders for the three external inputs:
- Per-dataset methylation matrices (probes x samples files)
- Illumina-style probe annotation manifests
- Single-column housekeeping gene lists
"""

from .annotation import AnnotationLoader
from .base import DataLoader
from .dataset import MethylationDataset
from .gene_list import GeneListLoader
from .methylation import MethylationDataLoader

__all__ = [
    "DataLoader",
    "AnnotationLoader",
    "GeneListLoader",
    "MethylationDataLoader",
    "MethylationDataset",
]
