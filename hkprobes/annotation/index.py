"""
Probe annotation index: region category and gene accession lookup.

Annotation fields follow the Illumina manifest convention, e.g. a region
group field of ``"TSS200;TSS1500"`` and an accession field of
``"NM_001256799;NM_002046"``. The region grammar is:

    field  := entry (";" entry)*
    region := classify(entry[0])

where ``classify`` checks for the substring ``"TSS"`` first, then
``"Body"``. Only the literal first entry counts: a missing field, a blank
field or a blank first entry (``";Body"``) yields the token ``"unknown"``,
which classifies as ``RegionCategory.OTHER``.
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

UNKNOWN_TOKEN = "unknown"
REGION_DELIMITER = ";"
ACCESSION_DELIMITERS = re.compile(r"[;,]")


class RegionCategory(str, Enum):
    """Gene-relative region of a probe."""

    TSS = "TSS"
    BODY = "Body"
    OTHER = "Other"

    @classmethod
    def parse(cls, name: str) -> "RegionCategory":
        """Parse a category name case-insensitively (``"tss"``, ``"Body"``)."""
        for member in cls:
            if member.value.lower() == str(name).strip().lower():
                return member
        raise ValueError(f"Unknown region category: {name!r}")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return not str(value).strip()


def first_token(field: Any) -> str:
    """Return the first semicolon-delimited entry of a region field."""
    if _is_blank(field):
        return UNKNOWN_TOKEN
    token = str(field).split(REGION_DELIMITER)[0].strip()
    return token if token else UNKNOWN_TOKEN


def classify_token(token: str) -> RegionCategory:
    """Map a region token to its category by substring containment."""
    if "TSS" in token:
        return RegionCategory.TSS
    if "Body" in token:
        return RegionCategory.BODY
    return RegionCategory.OTHER


def split_accessions(field: Any) -> Tuple[str, ...]:
    """Split an accession field on ``;`` or ``,``, dropping blanks."""
    if _is_blank(field):
        return ()
    tokens = (t.strip() for t in ACCESSION_DELIMITERS.split(str(field)))
    return tuple(t for t in tokens if t)


class AnnotationIndex:
    """
    Lookup of region category and gene accessions by probe identifier.

    Probes absent from the index are never an error: they resolve to the
    ``"unknown"`` token, ``RegionCategory.OTHER`` and no accessions.
    """

    def __init__(self, records: Mapping[str, Tuple[Any, Any]]):
        """
        Build the index from raw annotation fields.

        Args:
            records: Mapping of probe id -> (region field, accession field)
        """
        self._tokens: Dict[str, str] = {}
        self._accessions: Dict[str, Tuple[str, ...]] = {}
        for probe_id, (region_field, accession_field) in records.items():
            self._tokens[str(probe_id)] = first_token(region_field)
            self._accessions[str(probe_id)] = split_accessions(accession_field)

        logger.debug(f"Indexed annotation for {len(self._tokens)} probes")

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        region_col: str = "UCSC_RefGene_Group",
        accession_col: str = "UCSC_RefGene_Accession",
        probe_col: Optional[str] = None
    ) -> "AnnotationIndex":
        """
        Build the index from an annotation DataFrame.

        Args:
            df: Annotation table
            region_col: Column holding the region group field
            accession_col: Column holding the gene accession field
            probe_col: Column with probe ids; the index is used if None

        Returns:
            AnnotationIndex over the table's probes
        """
        probe_ids = df.index if probe_col is None else df[probe_col]
        records = dict(zip(probe_ids, zip(df[region_col], df[accession_col])))
        return cls(records)

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, probe_id: object) -> bool:
        return probe_id in self._tokens

    def region_token(self, probe_id: str) -> str:
        """First entry of the probe's region field, or ``"unknown"``."""
        return self._tokens.get(probe_id, UNKNOWN_TOKEN)

    def resolve_region(self, probe_id: str) -> RegionCategory:
        """Region category of a probe."""
        return classify_token(self.region_token(probe_id))

    def accessions(self, probe_id: str) -> Tuple[str, ...]:
        """Gene accession identifiers of a probe, empty if unannotated."""
        return self._accessions.get(probe_id, ())

    def matches_housekeeping(self, probe_id: str, gene_list: Iterable[str]) -> bool:
        """
        True iff any accession of the probe equals an entry of ``gene_list``.

        Matching is exact and case-sensitive on the whole identifier.
        """
        genes = gene_list if isinstance(gene_list, (set, frozenset)) else set(gene_list)
        return any(acc in genes for acc in self.accessions(probe_id))
