"""
Delimited dataset ingestion and cleaning.

Reads labelled records from a delimited text file, converts the
missing-value sentinel, keeps complete cases only, removes identifier
columns and re-encodes numeric label codes into class names.
"""

from dataclasses import dataclass, field

import numpy as np
import pandas as pd
import pandera.pandas as pa

from tumorclass.config.settings import DatasetConfig
from tumorclass.exceptions import LabelCodeError, MalformedRowError
from tumorclass.ingestion.base import DataLoader
from tumorclass.schemas.dataset import build_dataset_schema
from tumorclass.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class DatasetSummary:
    """
    Summary of a cleaned dataset.

    Attributes:
        n_rows: Records after cleaning.
        n_attributes: Number of numeric predictors.
        n_dropped: Records removed for missing values (None if unknown).
        class_counts: Class name -> record count.
    """

    n_rows: int
    n_attributes: int
    n_dropped: int | None
    class_counts: dict[str, int] = field(default_factory=dict)

    @property
    def class_fractions(self) -> dict[str, float]:
        """Class name -> share of records."""
        if self.n_rows == 0:
            return {name: 0.0 for name in self.class_counts}
        return {name: n / self.n_rows for name, n in self.class_counts.items()}


class DelimitedDatasetLoader(DataLoader):
    """Loader for a labelled delimited text file (e.g. breast-cancer-wisconsin.data)."""

    def _load_raw(self) -> pd.DataFrame:
        """Read every cell as text so sentinels and bad tokens stay visible."""
        path = self.config.path

        if not path.exists():
            msg = f"Dataset file not found: {path}"
            raise FileNotFoundError(msg)

        log.info("Reading delimited file", path=str(path))

        return pd.read_csv(
            path,
            sep=self.config.delimiter,
            header=0 if self.config.has_header else None,
            names=None if self.config.has_header else self.config.columns,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )

    def _clean(self, raw: pd.DataFrame) -> pd.DataFrame:
        """Clean raw records."""
        return clean_dataset(raw, self.config)

    def schema(self, df: pd.DataFrame) -> pa.DataFrameSchema:
        """Schema for the cleaned frame."""
        return build_dataset_schema(
            attribute_columns(df, self.config.label_column),
            self.config.label_column,
            self.config.class_names,
        )


def attribute_columns(df: pd.DataFrame, label_column: str) -> list[str]:
    """Predictor columns: everything except the label."""
    return [col for col in df.columns if col != label_column]


def _check_label_codes(labels: pd.Series, config: DatasetConfig) -> None:
    """Fail fast on any label value outside the configured codes."""
    expected = list(config.label_codes.keys())
    unexpected = sorted(set(labels) - set(expected))
    if unexpected:
        raise LabelCodeError(config.label_column, unexpected, expected)


def _to_numeric(values: pd.Series, column: str, missing_token: str) -> pd.Series:
    """Convert text cells to floats, mapping the sentinel to NaN."""
    missing = values.isin([missing_token, ""])
    numeric = pd.to_numeric(values.where(~missing), errors="coerce")

    malformed = numeric.isna() & ~missing
    if malformed.any():
        bad = values[malformed]
        raise MalformedRowError(
            column, bad.index.tolist()[:10], [str(v) for v in bad.unique()[:10]]
        )

    return pd.Series(
        numeric.astype("Float64").to_numpy(dtype=float, na_value=np.nan),
        index=values.index,
        name=column,
    )


def clean_dataset(raw: pd.DataFrame, config: DatasetConfig) -> pd.DataFrame:
    """
    Clean raw text records into a dataset.

    Policy is complete-case only: rows with any missing attribute are
    dropped, never imputed.

    Args:
        raw: Raw frame with every cell as text.
        config: Dataset configuration.

    Returns:
        DataFrame with float attributes and a string label column,
        index reset to 0..n-1.

    Raises:
        LabelCodeError: If the label holds a code outside label_codes.
        MalformedRowError: If an attribute holds a non-numeric token.
        ValueError: If a configured column is absent.
    """
    label_col = config.label_column
    if label_col not in raw.columns:
        msg = f"Label column '{label_col}' not found. Available: {list(raw.columns)}"
        raise ValueError(msg)

    df = raw.astype("string").apply(lambda col: col.str.strip())

    labels = df[label_col].fillna("")
    _check_label_codes(labels, config)

    to_drop = [*config.id_columns, *config.drop_columns]
    absent = [col for col in to_drop if col not in df.columns]
    if absent:
        msg = f"Cannot drop missing columns: {absent}"
        raise ValueError(msg)
    if to_drop:
        log.debug("Dropping columns", columns=to_drop)
        df = df.drop(columns=to_drop)

    attributes = attribute_columns(df, label_col)
    if not attributes:
        msg = "Dataset has no attribute columns after dropping identifiers"
        raise ValueError(msg)

    cleaned = pd.DataFrame(
        {col: _to_numeric(df[col], col, config.missing_token) for col in attributes}
    )

    before_dropna = len(cleaned)
    complete = cleaned.notna().all(axis=1)
    cleaned = cleaned.loc[complete].copy()
    if len(cleaned) < before_dropna:
        log.info(
            "Dropped rows with missing values",
            dropped=before_dropna - len(cleaned),
            remaining=len(cleaned),
        )

    cleaned[label_col] = labels[complete].map(config.label_codes).astype(str)

    return cleaned.reset_index(drop=True)


def load_dataset(config: DatasetConfig, *, validate: bool = True) -> pd.DataFrame:
    """
    Convenience function to load and clean a dataset.

    Args:
        config: Dataset configuration.
        validate: Whether to validate the cleaned frame.

    Returns:
        Cleaned dataset.
    """
    return DelimitedDatasetLoader(config).load(validate=validate)


def describe_dataset(
    df: pd.DataFrame,
    label_column: str,
    *,
    n_raw: int | None = None,
) -> DatasetSummary:
    """
    Summarise a cleaned dataset.

    Args:
        df: Cleaned dataset.
        label_column: Label column name.
        n_raw: Number of raw records before cleaning, if known.

    Returns:
        DatasetSummary.
    """
    counts = df[label_column].value_counts().sort_index()
    return DatasetSummary(
        n_rows=len(df),
        n_attributes=len(attribute_columns(df, label_column)),
        n_dropped=None if n_raw is None else n_raw - len(df),
        class_counts={str(k): int(v) for k, v in counts.items()},
    )

