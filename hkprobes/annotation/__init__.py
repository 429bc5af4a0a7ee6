"""
Probe annotation modules.
"""

from .index import AnnotationIndex, RegionCategory, classify_token, first_token, split_accessions

__all__ = [
    "AnnotationIndex",
    "RegionCategory",
    "classify_token",
    "first_token",
    "split_accessions",
]
