"""
Train/test partitioning.

Splits a cleaned dataset into disjoint, label-stratified training and
test subsets and exposes model-ready feature matrices and binary targets.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from tumorclass.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class Split:
    """
    Container for a stratified train/test partition.

    Attributes:
        train: Training records (original index kept).
        test: Test records (original index kept).
        label_column: Label column name.
        positive_class: Class encoded as 1 in targets.
        feature_names: Predictor column names.
        random_state: Seed that produced the split.
    """

    train: pd.DataFrame
    test: pd.DataFrame
    label_column: str
    positive_class: str
    feature_names: list[str]
    random_state: int

    @property
    def X_train(self) -> pd.DataFrame:
        """Training features."""
        return self.train[self.feature_names]

    @property
    def X_test(self) -> pd.DataFrame:
        """Test features."""
        return self.test[self.feature_names]

    @property
    def y_train(self) -> pd.Series:
        """Binary training target (1 = positive class)."""
        return self._binary(self.train)

    @property
    def y_test(self) -> pd.Series:
        """Binary test target (1 = positive class)."""
        return self._binary(self.test)

    @property
    def n_samples(self) -> int:
        """Total number of records across both subsets."""
        return len(self.train) + len(self.test)

    def _binary(self, df: pd.DataFrame) -> pd.Series:
        return (df[self.label_column] == self.positive_class).astype(int)

    def class_proportions(self) -> dict[str, float]:
        """Positive-class share in the train and test subsets."""
        return {
            "train": float(np.mean(self.y_train)) if len(self.train) else 0.0,
            "test": float(np.mean(self.y_test)) if len(self.test) else 0.0,
        }


def partition(
    dataset: pd.DataFrame,
    train_fraction: float,
    label_column: str,
    *,
    positive_class: str,
    random_state: int = 1,
) -> Split:
    """
    Partition a dataset into stratified training and test subsets.

    Every record lands in exactly one subset. Re-running with the same
    seed yields an identical split.

    Args:
        dataset: Cleaned dataset.
        train_fraction: Share of records used for training, in (0, 1).
        label_column: Column to stratify on.
        positive_class: Class encoded as 1 in targets.
        random_state: Seed for the shuffle.

    Returns:
        Split with train and test frames.

    Raises:
        ValueError: If the fraction is out of range, the label column is
            missing, or a class has too few records to stratify.
    """
    if not 0.0 < train_fraction < 1.0:
        msg = f"train_fraction must be in (0, 1), got: {train_fraction}"
        raise ValueError(msg)
    if label_column not in dataset.columns:
        msg = f"Label column '{label_column}' not found in dataset"
        raise ValueError(msg)

    train, test = train_test_split(
        dataset,
        train_size=train_fraction,
        stratify=dataset[label_column],
        random_state=random_state,
        shuffle=True,
    )

    feature_names = [col for col in dataset.columns if col != label_column]
    split = Split(
        train=train,
        test=test,
        label_column=label_column,
        positive_class=positive_class,
        feature_names=feature_names,
        random_state=random_state,
    )

    proportions = split.class_proportions()
    log.info(
        "Partitioned dataset",
        n_train=len(train),
        n_test=len(test),
        positive_train=f"{proportions['train']:.3f}",
        positive_test=f"{proportions['test']:.3f}",
        random_state=random_state,
    )

    return split
