from pathlib import Path

import pytest
import yaml

from hkprobes.annotation import RegionCategory
from hkprobes.errors import ConfigurationError
from hkprobes.utils.config import Config, load_config


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_defaults():
    config = Config()
    assert config.threshold == 0.05
    assert config.threshold_method == "fixed"
    assert config.region_categories == (RegionCategory.TSS, RegionCategory.BODY)
    assert config.n_jobs == 1
    assert config.datasets == []


def test_yaml_paths_resolve_against_config_directory(tmp_path: Path):
    cfg = write_yaml(tmp_path / "run.yaml", {
        "threshold": 0.04,
        "region_categories": ["body"],
        "annotation": {"file": "ann.csv", "skiprows": 7},
        "gene_list": {"file": "/abs/genes.txt"},
        "datasets": [{"name": "A", "file": "a.csv"}],
        "output_dir": "out",
    })
    config = load_config(cfg)

    assert config.threshold == 0.04
    assert config.region_categories == (RegionCategory.BODY,)
    assert config.annotation["skiprows"] == 7
    assert config.annotation["region_col"] == "UCSC_RefGene_Group"
    assert config.get_data_path("annotation") == tmp_path / "ann.csv"
    assert config.get_data_path("gene_list") == Path("/abs/genes.txt")
    assert config.tables_dir == tmp_path / "out" / "tables"


def test_overrides_apply_after_yaml_and_none_is_ignored(tmp_path: Path):
    cfg = write_yaml(tmp_path / "run.yaml", {"threshold": 0.04, "threshold_method": "density"})
    config = load_config(cfg, threshold=0.1, threshold_method=None)
    assert config.threshold == 0.1
    assert config.threshold_method == "density"


@pytest.mark.parametrize("overrides", [
    {"threshold": -1},
    {"threshold": "0.05"},
    {"threshold": False},
    {"threshold_method": "kmeans"},
    {"region_categories": []},
    {"region_categories": ["Other"]},
    {"region_categories": ["promoter"]},
    {"n_jobs": 0},
    {"datasets": [{"file": "a.csv"}]},
    {"datasets": [{"name": "A"}, {"name": "A"}]},
    {"datasets": [{"name": "A", "threshold": -0.2}]},
    {"datasets": [{"name": "A", "threshold": {"TSS": "high"}}]},
])
def test_invalid_configuration_rejected(overrides):
    with pytest.raises(ConfigurationError):
        Config(**overrides)


def test_dataset_threshold_overrides():
    config = Config(datasets=[
        {"name": "A", "threshold": 0.03},
        {"name": "B", "threshold": {"tss": 0.02}},
        {"name": "C"},
    ])
    assert config.dataset_threshold("A", RegionCategory.BODY) == 0.03
    assert config.dataset_threshold("B", RegionCategory.TSS) == 0.02
    assert config.dataset_threshold("B", RegionCategory.BODY) == 0.05
    assert config.dataset_threshold("C", RegionCategory.TSS) == 0.05
    assert config.dataset_threshold("unknown", RegionCategory.TSS) == 0.05


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_non_mapping_yaml_rejected(tmp_path: Path):
    cfg = write_yaml(tmp_path / "list.yaml", [1, 2, 3])
    with pytest.raises(ConfigurationError, match="must hold a mapping"):
        load_config(cfg)


def test_missing_data_file_setting():
    with pytest.raises(ConfigurationError, match="No file configured"):
        Config().get_data_path("annotation")
