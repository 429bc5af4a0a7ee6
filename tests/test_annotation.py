import numpy as np
import pandas as pd
import pytest

from hkprobes.annotation import (
    AnnotationIndex,
    RegionCategory,
    classify_token,
    first_token,
    split_accessions,
)


def test_tss_group_field_classified_as_tss_not_body(annotation_index):
    assert annotation_index.region_token("cg01") == "TSS200"
    assert annotation_index.resolve_region("cg01") is RegionCategory.TSS


def test_body_field_classified_as_body(annotation_index):
    assert annotation_index.resolve_region("cg02") is RegionCategory.BODY


def test_only_first_token_decides_region(annotation_index):
    assert annotation_index.region_token("cg07") == "5'UTR"
    assert annotation_index.resolve_region("cg07") is RegionCategory.OTHER


@pytest.mark.parametrize("field", [None, np.nan, "", "   ", ";Body"])
def test_blank_or_malformed_field_is_unknown(field):
    assert first_token(field) == "unknown"
    assert classify_token(first_token(field)) is RegionCategory.OTHER


def test_tss_checked_before_body():
    assert classify_token("TSSBody") is RegionCategory.TSS


def test_split_accessions_handles_both_delimiters():
    assert split_accessions("NM_1;NM_2, NM_3;;") == ("NM_1", "NM_2", "NM_3")
    assert split_accessions(np.nan) == ()


def test_missing_probe_is_unknown_and_never_matches(annotation_index, gene_list):
    assert "cg99" not in annotation_index
    assert annotation_index.region_token("cg99") == "unknown"
    assert annotation_index.resolve_region("cg99") is RegionCategory.OTHER
    assert annotation_index.accessions("cg99") == ()
    assert not annotation_index.matches_housekeeping("cg99", gene_list)


def test_housekeeping_match_uses_any_accession(annotation_index, gene_list):
    assert annotation_index.matches_housekeeping("cg06", gene_list)
    assert not annotation_index.matches_housekeeping("cg03", gene_list)


def test_housekeeping_match_is_exact_and_case_sensitive():
    index = AnnotationIndex({"cg1": ("TSS200", "NM_0011"), "cg2": ("TSS200", "nm_001")})
    assert not index.matches_housekeeping("cg1", ["NM_001"])
    assert not index.matches_housekeeping("cg2", ["NM_001"])
    assert index.matches_housekeeping("cg1", ["NM_0011"])


def test_from_frame_with_probe_column():
    df = pd.DataFrame({
        "Name": ["cg1", "cg2"],
        "group": ["Body", "TSS1500"],
        "acc": ["NM_1", "NM_2"],
    })
    index = AnnotationIndex.from_frame(df, region_col="group", accession_col="acc", probe_col="Name")
    assert len(index) == 2
    assert index.resolve_region("cg2") is RegionCategory.TSS
    assert index.accessions("cg1") == ("NM_1",)


def test_region_category_parse():
    assert RegionCategory.parse("tss") is RegionCategory.TSS
    assert RegionCategory.parse(" Body ") is RegionCategory.BODY
    with pytest.raises(ValueError, match="Unknown region category"):
        RegionCategory.parse("promoter")
