import numpy as np
import pytest

from hkprobes.annotation import RegionCategory
from hkprobes.errors import ConfigurationError, ExclusionReason
from hkprobes.selection import ProbeSetBuilder

from .conftest import make_dataset


def test_build_candidate_sets(dataset, annotation_index, gene_list):
    sets = ProbeSetBuilder().build(dataset, annotation_index, gene_list)

    assert sets.dataset == "D1"
    assert sets.tss == frozenset({"cg01"})
    assert sets.body == frozenset({"cg02"})


def test_exclusion_report_counts(dataset, annotation_index, gene_list):
    report = ProbeSetBuilder().build(dataset, annotation_index, gene_list).report

    assert report.n_probes == 8
    assert report.count(ExclusionReason.MISSING_DATA) == 1
    assert report.count(ExclusionReason.UNANNOTATED) == 1
    assert report.count(ExclusionReason.OTHER_REGION) == 3
    assert report.count(ExclusionReason.NOT_HOUSEKEEPING) == 1
    assert report.n_excluded == 6

    row = report.to_frame().iloc[0]
    assert row["dataset"] == "D1"
    assert row["missing_data"] == 1


def test_tss_and_body_sets_are_disjoint(dataset, annotation_index, gene_list):
    sets = ProbeSetBuilder().build(dataset, annotation_index, gene_list)
    assert not (sets.tss & sets.body)


def test_probe_with_missing_value_never_a_candidate(dataset, annotation_index, gene_list):
    # cg06 is a Body probe of a housekeeping gene, but has a missing value
    assert annotation_index.resolve_region("cg06") is RegionCategory.BODY
    assert annotation_index.matches_housekeeping("cg06", gene_list)

    sets = ProbeSetBuilder().build(dataset, annotation_index, gene_list)
    assert "cg06" not in sets.tss | sets.body


def test_missingness_is_computed_per_dataset(annotation_index, gene_list):
    d1 = make_dataset("D1", {"cg01": [0.1, np.nan, 0.1], "cg02": [0.8, 0.8, 0.8]})
    d2 = make_dataset("D2", {"cg01": [0.1, 0.1, 0.1], "cg02": [0.8, 0.8, 0.8]})
    builder = ProbeSetBuilder()

    assert builder.build(d1, annotation_index, gene_list).tss == frozenset()
    assert builder.build(d2, annotation_index, gene_list).tss == frozenset({"cg01"})


def test_unmatched_gene_contributes_nothing(dataset, annotation_index, gene_list):
    builder = ProbeSetBuilder()
    base = builder.build(dataset, annotation_index, gene_list)
    extended = builder.build(dataset, annotation_index, gene_list + ("NM_000000",))

    assert extended.tss == base.tss
    assert extended.body == base.body


def test_single_region_category(dataset, annotation_index, gene_list):
    sets = ProbeSetBuilder([RegionCategory.TSS]).build(dataset, annotation_index, gene_list)

    assert sets.tss == frozenset({"cg01"})
    assert sets.body == frozenset()
    assert sets.report.count(ExclusionReason.OTHER_REGION) == 4


def test_build_does_not_mutate_dataset(dataset, annotation_index, gene_list):
    before = dataset.betas.copy()
    ProbeSetBuilder().build(dataset, annotation_index, gene_list)
    assert dataset.betas.equals(before)


@pytest.mark.parametrize("regions", [[], [RegionCategory.OTHER]])
def test_invalid_region_categories(regions):
    with pytest.raises(ConfigurationError):
        ProbeSetBuilder(regions)
