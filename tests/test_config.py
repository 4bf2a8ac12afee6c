"""Tests for configuration system."""

from pathlib import Path

import pytest

from tumorclass.config import (
    DatasetConfig,
    EvaluationConfig,
    RankingMetric,
    SplitConfig,
    TrainingConfig,
    load_config,
)


class TestDatasetConfig:
    """Tests for DatasetConfig."""

    def test_defaults_match_biopsy_layout(self) -> None:
        """Test default column order, sentinel and label codes."""
        config = DatasetConfig(path=Path("data.csv"))
        assert config.columns[0] == "id"
        assert config.columns[-1] == "class"
        assert config.missing_token == "?"
        assert config.label_codes == {"2": "benign", "4": "malignant"}
        assert config.class_names == ["benign", "malignant"]

    def test_integer_codes_are_stringified(self) -> None:
        """Test YAML-style integer keys become strings."""
        config = DatasetConfig(
            path=Path("data.csv"),
            label_codes={0: "no", 1: "yes"},
            positive_class="yes",
        )
        assert config.label_codes == {"0": "no", "1": "yes"}

    def test_label_codes_need_two_classes(self) -> None:
        """Test that three classes are rejected."""
        with pytest.raises(ValueError, match="exactly two classes"):
            DatasetConfig(
                path=Path("data.csv"),
                label_codes={"1": "a", "2": "b", "3": "c"},
                positive_class="a",
            )

    def test_positive_class_must_be_known(self) -> None:
        """Test that the positive class must be one of the label classes."""
        with pytest.raises(ValueError, match="positive_class"):
            DatasetConfig(path=Path("data.csv"), positive_class="cancer")

    def test_label_column_in_columns(self) -> None:
        """Test headerless layouts must contain the label column."""
        with pytest.raises(ValueError, match="label_column"):
            DatasetConfig(
                path=Path("data.csv"),
                columns=["id", "a", "b"],
            )


class TestSplitAndTrainingConfig:
    """Tests for split and training bounds."""

    def test_train_fraction_bounds(self) -> None:
        """Test that fractions of 0 and 1 are rejected."""
        with pytest.raises(ValueError):
            SplitConfig(train_fraction=1.0)
        with pytest.raises(ValueError):
            SplitConfig(train_fraction=0.0)

    def test_neighbors_sorted_and_unique(self) -> None:
        """Test neighbour candidates are normalised."""
        config = TrainingConfig(knn_neighbors=[5, 1, 3, 3])
        assert config.knn_neighbors == [1, 3, 5]

    def test_neighbors_must_be_positive(self) -> None:
        """Test that zero neighbours is rejected."""
        with pytest.raises(ValueError, match=">= 1"):
            TrainingConfig(knn_neighbors=[0, 1])

    def test_evaluation_defaults(self) -> None:
        """Test default threshold and ranking metric."""
        config = EvaluationConfig()
        assert config.threshold == 0.5
        assert config.ranking_metric is RankingMetric.AUTO


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_minimal_config(self, tmp_path: Path) -> None:
        """Test loading a config with only project and data path."""
        path = tmp_path / "minimal.yaml"
        path.write_text("project: demo\ndata:\n  path: biopsy.data\n", encoding="utf-8")

        config = load_config(path)

        assert config.project == "demo"
        assert config.dataset.path == tmp_path / "biopsy.data"
        assert config.split.train_fraction == 0.7
        assert config.models.enabled == [
            "logistic_regression",
            "knn",
            "lda",
            "qda",
            "naive_bayes",
        ]
        assert config.experiment_name == "demo"
        assert config.plots_dir == Path("./output") / "demo" / "plots"

    def test_missing_project(self, tmp_path: Path) -> None:
        """Test that a missing project name is an error."""
        path = tmp_path / "bad.yaml"
        path.write_text("data:\n  path: x.data\n", encoding="utf-8")

        with pytest.raises(ValueError, match="project"):
            load_config(path)

    def test_missing_data_path(self, tmp_path: Path) -> None:
        """Test that a missing data path is an error."""
        path = tmp_path / "bad.yaml"
        path.write_text("project: demo\n", encoding="utf-8")

        with pytest.raises(ValueError, match="data.path"):
            load_config(path)

    def test_base_yaml_inheritance(self, tmp_path: Path) -> None:
        """Test that a sibling base.yaml supplies defaults."""
        (tmp_path / "base.yaml").write_text(
            "split:\n  train_fraction: 0.8\n"
            "data:\n  label:\n    codes:\n      0: healthy\n      1: sick\n"
            "    positive_class: sick\n",
            encoding="utf-8",
        )
        path = tmp_path / "project.yaml"
        path.write_text(
            "project: demo\ndata:\n  path: x.data\nsplit:\n  random_state: 7\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.split.train_fraction == 0.8
        assert config.split.random_state == 7
        assert config.dataset.label_codes == {"0": "healthy", "1": "sick"}
        assert config.dataset.positive_class == "sick"

    def test_label_codes_replace_base(self, tmp_path: Path) -> None:
        """Test project label codes replace the inherited codes instead of merging."""
        (tmp_path / "base.yaml").write_text(
            "data:\n  label:\n    codes:\n      2: benign\n      4: malignant\n",
            encoding="utf-8",
        )
        path = tmp_path / "letters.yaml"
        path.write_text(
            "project: demo\ndata:\n  path: x.data\n"
            "  label:\n    codes:\n      B: benign\n      M: malignant\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.dataset.label_codes == {"B": "benign", "M": "malignant"}

    def test_env_var_interpolation(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test ${VAR} and ${VAR:default} substitution."""
        monkeypatch.setenv("BIOPSY_FILE", "/data/biopsy.data")
        monkeypatch.delenv("TRACKING", raising=False)
        path = tmp_path / "env.yaml"
        path.write_text(
            "project: demo\n"
            "data:\n  path: ${BIOPSY_FILE}\n"
            "mlflow:\n  tracking_uri: ${TRACKING:sqlite:///mlflow.db}\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.dataset.path == Path("/data/biopsy.data")
        assert config.mlflow.tracking_uri == "sqlite:///mlflow.db"

    def test_ranking_metric_parsed(self, tmp_path: Path) -> None:
        """Test ranking metric enum parsing."""
        path = tmp_path / "rank.yaml"
        path.write_text(
            "project: demo\ndata:\n  path: x.data\nevaluation:\n  ranking_metric: pr_auc\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.evaluation.ranking_metric is RankingMetric.PR_AUC

    def test_shipped_configs_load(self) -> None:
        """Test the example configs in configs/ are valid."""
        configs_dir = Path(__file__).parent.parent / "configs"

        config = load_config(configs_dir / "biopsy-reduced.yaml")

        assert config.project == "biopsy-reduced"
        assert config.dataset.drop_columns == ["cell_shape_uniformity"]
        assert config.training.cv_folds == 10
        assert config.dataset.label_codes == {"2": "benign", "4": "malignant"}
