"""Tests for train/test partitioning."""

import pandas as pd
import pytest

from tumorclass.ingestion import load_dataset
from tumorclass.modeling.data import partition


@pytest.fixture
def dataset(dataset_config) -> pd.DataFrame:
    """Cleaned synthetic dataset (194 records)."""
    return load_dataset(dataset_config)


class TestPartition:
    """Tests for partition."""

    def test_sizes_add_up(self, dataset) -> None:
        """Test every record lands in one subset."""
        split = partition(dataset, 0.7, "class", positive_class="malignant")

        assert len(split.train) + len(split.test) == len(dataset)
        assert split.n_samples == len(dataset)
        assert len(split.train) == pytest.approx(0.7 * len(dataset), abs=1)

    def test_subsets_disjoint(self, dataset) -> None:
        """Test no record appears in both subsets."""
        split = partition(dataset, 0.7, "class", positive_class="malignant")

        assert set(split.train.index).isdisjoint(split.test.index)
        assert set(split.train.index) | set(split.test.index) == set(dataset.index)

    def test_deterministic_under_seed(self, dataset) -> None:
        """Test the same seed reproduces the split."""
        first = partition(dataset, 0.7, "class", positive_class="malignant", random_state=1)
        second = partition(dataset, 0.7, "class", positive_class="malignant", random_state=1)

        assert list(first.test.index) == list(second.test.index)

    def test_different_seed_changes_split(self, dataset) -> None:
        """Test another seed gives another test subset."""
        first = partition(dataset, 0.7, "class", positive_class="malignant", random_state=1)
        second = partition(dataset, 0.7, "class", positive_class="malignant", random_state=2)

        assert set(first.test.index) != set(second.test.index)

    def test_stratified(self, dataset) -> None:
        """Test class proportions agree within one record."""
        split = partition(dataset, 0.7, "class", positive_class="malignant")

        for subset in (split.train, split.test):
            expected = (dataset["class"] == "malignant").mean() * len(subset)
            observed = (subset["class"] == "malignant").sum()
            assert abs(observed - expected) <= 1

    def test_features_and_targets(self, dataset) -> None:
        """Test model-ready views exclude the label and encode it as 0/1."""
        split = partition(dataset, 0.7, "class", positive_class="malignant")

        assert "class" not in split.X_train.columns
        assert len(split.feature_names) == 9
        assert set(split.y_train.unique()) == {0, 1}
        assert split.y_test.sum() == (split.test["class"] == "malignant").sum()

    @pytest.mark.parametrize("fraction", [0.0, 1.0, 1.5, -0.1])
    def test_invalid_fraction(self, dataset, fraction) -> None:
        """Test fractions outside (0, 1) are rejected."""
        with pytest.raises(ValueError, match="train_fraction"):
            partition(dataset, fraction, "class", positive_class="malignant")

    def test_missing_label_column(self, dataset) -> None:
        """Test an unknown label column is rejected."""
        with pytest.raises(ValueError, match="diagnosis"):
            partition(dataset, 0.7, "diagnosis", positive_class="malignant")
