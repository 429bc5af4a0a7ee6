import numpy as np
import pandas as pd
import pytest

from hkprobes.annotation import AnnotationIndex
from hkprobes.data_loaders import MethylationDataset

SAMPLES = ["s1", "s2", "s3", "s4"]


@pytest.fixture
def annotation_index():
    return AnnotationIndex({
        "cg01": ("TSS200;TSS1500", "NM_001;NM_001"),
        "cg02": ("Body;Body", "NM_002"),
        "cg03": ("TSS1500", "NM_999"),
        "cg04": ("3'UTR", "NM_001"),
        "cg05": (np.nan, np.nan),
        "cg06": ("Body", "NM_003,NM_004"),
        "cg07": ("5'UTR;TSS200", "NM_002"),
    })


@pytest.fixture
def gene_list():
    return ("NM_001", "NM_002", "NM_004")


@pytest.fixture
def dataset():
    betas = pd.DataFrame(
        {
            "cg01": [0.10, 0.10, 0.10, 0.10],
            "cg02": [0.80, 0.82, 0.79, 0.81],
            "cg03": [0.20, 0.25, 0.20, 0.25],
            "cg04": [0.50, 0.50, 0.50, 0.50],
            "cg05": [0.30, 0.30, 0.30, 0.30],
            "cg06": [0.50, np.nan, 0.50, 0.50],
            "cg07": [0.90, 0.90, 0.90, 0.90],
            "cg08": [0.40, 0.40, 0.40, 0.40],
        },
        index=SAMPLES,
    )
    return MethylationDataset(name="D1", betas=betas)


def make_dataset(name, columns):
    """Dataset from a mapping of probe id -> per-sample values."""
    n = len(next(iter(columns.values())))
    return MethylationDataset(
        name=name,
        betas=pd.DataFrame(columns, index=[f"{name}_s{i}" for i in range(n)]),
    )
