"""
Configuration management for the housekeeping probe selection pipeline.

Supports loading configurations from YAML files for:
- Variability threshold and threshold method
- Region categories
- Annotation and gene list inputs
- Dataset specifications
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from ..annotation import RegionCategory
from ..errors import ConfigurationError
from ..selection.variability import DEFAULT_THRESHOLD, THRESHOLD_METHODS, validate_threshold


class Config:
    """
    Central configuration class for the housekeeping probe selection pipeline.

    Relative input and output paths are resolved against ``base_dir``,
    which is the directory of the YAML file when one is given.

    Attributes:
        base_dir: Directory that anchors relative paths
        threshold: Maximum acceptable cross-sample standard deviation
        threshold_method: "fixed" or "density"
        region_categories: Region categories to select probes for
        n_jobs: Worker threads for per-dataset processing
        annotation: Annotation file and column settings
        gene_list: Housekeeping gene list file settings
        datasets: Dataset specifications (name, file, samples, threshold)
        output_dir: Directory for result tables
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        base_dir: Optional[Union[str, Path]] = None,
        **overrides
    ):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML config file. If None, uses defaults.
            base_dir: Directory for relative paths (defaults to the config
                file's directory, else ".")
            **overrides: Top-level keys applied after the YAML file
        """
        self.config_file = Path(config_file) if config_file else None
        if base_dir is not None:
            self.base_dir = Path(base_dir)
        elif self.config_file is not None:
            self.base_dir = self.config_file.parent
        else:
            self.base_dir = Path(".")

        self._init_defaults()

        if self.config_file is not None:
            self._load_yaml(self.config_file)

        self._update_from_dict({k: v for k, v in overrides.items() if v is not None})
        self.validate()

    def _init_defaults(self):
        """Initialize default configuration values."""
        self.threshold = DEFAULT_THRESHOLD
        self.threshold_method = "fixed"
        self.region_categories: Tuple[RegionCategory, ...] = (
            RegionCategory.TSS,
            RegionCategory.BODY,
        )
        self.n_jobs = 1

        self.annotation: Dict[str, Any] = {
            "file": None,
            "probe_col": "IlmnID",
            "region_col": "UCSC_RefGene_Group",
            "accession_col": "UCSC_RefGene_Accession",
            "skiprows": 0
        }
        self.gene_list: Dict[str, Any] = {
            "file": None,
            "column": 0,
            "header": False
        }
        self.datasets: List[Dict[str, Any]] = []

        self.output_dir = Path("results")
        self.log_file: Optional[str] = None

    def _load_yaml(self, config_path: Path):
        """Load configuration from YAML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Config file {config_path} must hold a mapping, got {type(config_data).__name__}"
            )
        self._update_from_dict(config_data)

    def _update_from_dict(self, config_dict: Mapping[str, Any]):
        """Update configuration from dictionary."""
        if "threshold" in config_dict:
            self.threshold = config_dict["threshold"]
        if "threshold_method" in config_dict:
            self.threshold_method = config_dict["threshold_method"]
        if "region_categories" in config_dict:
            self.region_categories = self._parse_regions(config_dict["region_categories"])
        if "n_jobs" in config_dict:
            self.n_jobs = config_dict["n_jobs"]
        if "annotation" in config_dict:
            self.annotation.update(config_dict["annotation"] or {})
        if "gene_list" in config_dict:
            self.gene_list.update(config_dict["gene_list"] or {})
        if "datasets" in config_dict:
            self.datasets = copy.deepcopy(list(config_dict["datasets"] or []))
        if "output_dir" in config_dict:
            self.output_dir = Path(config_dict["output_dir"])
        if "log_file" in config_dict:
            self.log_file = config_dict["log_file"]

    @staticmethod
    def _parse_regions(names: Any) -> Tuple[RegionCategory, ...]:
        if isinstance(names, str):
            names = [names]
        try:
            return tuple(dict.fromkeys(RegionCategory.parse(n) for n in names))
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def validate(self) -> None:
        """
        Check the configuration before any computation.

        Raises:
            ConfigurationError: On any invalid setting
        """
        self.threshold = validate_threshold(self.threshold)

        if self.threshold_method not in THRESHOLD_METHODS:
            raise ConfigurationError(
                f"Unknown threshold_method {self.threshold_method!r}, "
                f"expected one of {THRESHOLD_METHODS}"
            )

        if not self.region_categories:
            raise ConfigurationError("region_categories must not be empty")
        if RegionCategory.OTHER in self.region_categories:
            raise ConfigurationError("region_categories may only contain TSS and Body")

        if isinstance(self.n_jobs, bool) or not isinstance(self.n_jobs, int) or self.n_jobs < 1:
            raise ConfigurationError(f"n_jobs must be a positive integer, got {self.n_jobs!r}")

        names = []
        for i, spec in enumerate(self.datasets):
            if not isinstance(spec, dict) or not spec.get("name"):
                raise ConfigurationError(f"Dataset entry {i} needs a 'name'")
            names.append(spec["name"])
            if "threshold" in spec:
                self._validate_override(spec["name"], spec["threshold"])
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate dataset names: {duplicates}")

    def _validate_override(self, name: str, override: Any) -> None:
        if isinstance(override, dict):
            for region, value in override.items():
                self._parse_regions([region])
                validate_threshold(value, name=f"threshold[{name}][{region}]")
        else:
            validate_threshold(override, name=f"threshold[{name}]")

    def dataset_threshold(self, name: str, region: RegionCategory) -> float:
        """
        Threshold for a dataset and region.

        A dataset entry may override the global threshold with a number or
        with a mapping of region name to number.
        """
        for spec in self.datasets:
            if spec.get("name") != name or "threshold" not in spec:
                continue
            override = spec["threshold"]
            if isinstance(override, dict):
                for key, value in override.items():
                    if RegionCategory.parse(key) == region:
                        return float(value)
                return self.threshold
            return float(override)
        return self.threshold

    def resolve_path(self, path: Union[str, Path]) -> Path:
        """Resolve a path against ``base_dir`` if relative."""
        path = Path(path)
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    def get_data_path(self, file_key: str) -> Path:
        """Get full path for the annotation or gene list file."""
        section = getattr(self, file_key, None)
        if not isinstance(section, dict) or not section.get("file"):
            raise ConfigurationError(f"No file configured for {file_key!r}")
        return self.resolve_path(section["file"])

    @property
    def tables_dir(self) -> Path:
        return self.resolve_path(self.output_dir) / "tables"

    def get_output_path(self, filename: str) -> Path:
        """Get output path for a result table."""
        return self.tables_dir / filename

    def ensure_output_dirs(self):
        """Create output directories if they don't exist."""
        self.tables_dir.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return (
            f"Config(threshold={self.threshold}, "
            f"method='{self.threshold_method}', "
            f"regions={[r.value for r in self.region_categories]}, "
            f"datasets={[d.get('name') for d in self.datasets]}, "
            f"base_dir='{self.base_dir}')"
        )


def load_config(config_file: Optional[Union[str, Path]] = None, **overrides) -> Config:
    """
    Load configuration for the selection pipeline.

    Args:
        config_file: Path to YAML configuration file
        **overrides: Top-level keys overriding the file (None is ignored)

    Returns:
        Config object with all settings loaded

    Example:
        >>> config = load_config("configs/default.yaml", threshold=0.04)
        >>> config.threshold
        0.04
    """
    return Config(config_file=config_file, **overrides)
