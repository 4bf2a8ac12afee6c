"""Pytest configuration and shared fixtures."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import structlog

from tumorclass.config.settings import (
    BIOPSY_COLUMNS,
    DatasetConfig,
    OutputConfig,
    PipelineConfig,
    SplitConfig,
    TrainingConfig,
)

ATTRIBUTES = BIOPSY_COLUMNS[1:-1]


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


def make_biopsy_records(
    n_benign: int = 130,
    n_malignant: int = 70,
    n_missing: int = 6,
    seed: int = 0,
) -> pd.DataFrame:
    """
    Create synthetic biopsy records in the raw file layout.

    Benign scores are drawn from 1-5, malignant from 3-10, so the classes
    overlap slightly. The first n_missing rows get '?' for bare_nuclei.
    """
    rng = np.random.default_rng(seed)
    n = n_benign + n_malignant

    benign = rng.integers(1, 6, size=(n_benign, len(ATTRIBUTES)))
    malignant = rng.integers(3, 11, size=(n_malignant, len(ATTRIBUTES)))
    scores = np.vstack([benign, malignant])
    codes = np.array([2] * n_benign + [4] * n_malignant)

    order = rng.permutation(n)
    df = pd.DataFrame(scores[order], columns=ATTRIBUTES).astype(str)
    df.insert(0, "id", [str(1000000 + i) for i in range(n)])
    df["class"] = codes[order].astype(str)
    df.loc[: n_missing - 1, "bare_nuclei"] = "?"
    return df


@pytest.fixture
def raw_records() -> pd.DataFrame:
    """Raw text records, 200 rows of which 6 have a missing value."""
    return make_biopsy_records()


@pytest.fixture
def data_file(tmp_path: Path, raw_records: pd.DataFrame) -> Path:
    """Raw records written without header, like the UCI file."""
    path = tmp_path / "breast-cancer-wisconsin.data"
    raw_records.to_csv(path, header=False, index=False)
    return path


@pytest.fixture
def dataset_config(data_file: Path) -> DatasetConfig:
    """Dataset configuration pointing at the synthetic file."""
    return DatasetConfig(path=data_file)


@pytest.fixture
def pipeline_config(dataset_config: DatasetConfig, tmp_path: Path) -> PipelineConfig:
    """Small, fast configuration for training tests."""
    return PipelineConfig(
        project="test-biopsy",
        dataset=dataset_config,
        split=SplitConfig(train_fraction=0.7, random_state=1),
        training=TrainingConfig(
            cv_folds=5,
            random_state=1,
            knn_neighbors=[1, 3, 5, 7],
        ),
        output=OutputConfig(output_root=tmp_path / "output"),
    )


@pytest.fixture
def config_file(tmp_path: Path, data_file: Path) -> Path:
    """YAML configuration file referencing the synthetic data."""
    path = tmp_path / "biopsy.yaml"
    path.write_text(
        f"""
project: test-biopsy
data:
  path: {data_file.name}
training:
  cv_folds: 5
  knn_neighbors: [1, 3, 5]
output:
  root: {tmp_path / "output"}
""",
        encoding="utf-8",
    )
    return path
