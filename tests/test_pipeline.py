"""End-to-end tests for the comparison pipeline."""

from unittest.mock import patch

import pytest

from tumorclass.config.settings import EvaluationConfig, RankingMetric
from tumorclass.exceptions import LabelCodeError
from tumorclass.workflow import ComparisonPipeline, run_comparison


class TestComparisonPipeline:
    """Tests for ComparisonPipeline."""

    def test_full_run(self, pipeline_config) -> None:
        """Test every stage runs and yields a total ranking."""
        result = run_comparison(pipeline_config)

        assert result.summary.n_rows == 194
        assert result.summary.n_dropped == 6
        assert result.split.n_samples == 194
        assert list(result.models) == pipeline_config.models.enabled
        assert set(result.results) == set(pipeline_config.models.enabled)
        assert sorted(result.ranking.order) == sorted(pipeline_config.models.enabled)
        assert result.ranking.best == result.ranking.order[0]
        assert result.plot_paths == []
        assert result.run_id is None

    def test_metrics_use_test_subset(self, pipeline_config) -> None:
        """Test each model is scored on every test record."""
        result = run_comparison(pipeline_config, model_names=["lda", "naive_bayes"])

        n_test = len(result.split.test)
        for metrics in result.results.values():
            assert metrics.n_samples == n_test
            assert metrics.tn + metrics.fp + metrics.fn + metrics.tp == n_test
            # Synthetic classes are well separated
            assert metrics.roc_auc > 0.8

    @pytest.mark.parametrize(
        ("imbalance_threshold", "expected"),
        [(0.2, RankingMetric.ROC_AUC), (0.45, RankingMetric.PR_AUC)],
    )
    def test_auto_ranking_metric(self, pipeline_config, imbalance_threshold, expected) -> None:
        """Test auto ranking compares the minority share (about 0.35) to the threshold."""
        config = pipeline_config.model_copy(
            update={"evaluation": EvaluationConfig(imbalance_threshold=imbalance_threshold)}
        )

        result = run_comparison(config, model_names=["lda", "qda"])

        assert result.ranking.metric is expected

    def test_explicit_ranking_metric(self, pipeline_config) -> None:
        """Test the configured ranking metric is honoured."""
        config = pipeline_config.model_copy(
            update={"evaluation": EvaluationConfig(ranking_metric=RankingMetric.PR_AUC)}
        )

        result = ComparisonPipeline(config).run(["lda"])

        assert result.ranking.metric is RankingMetric.PR_AUC

    def test_deterministic(self, pipeline_config) -> None:
        """Test two runs with the same seeds agree."""
        first = run_comparison(pipeline_config, model_names=["knn", "logistic_regression"])
        second = run_comparison(pipeline_config, model_names=["knn", "logistic_regression"])

        assert first.ranking.order == second.ranking.order
        for name in first.results:
            assert first.results[name].accuracy == second.results[name].accuracy
        assert first.models["knn"].best_params == second.models["knn"].best_params

    def test_saves_plots(self, pipeline_config, tmp_path) -> None:
        """Test ROC and PR overlays are written when requested."""
        plots_dir = tmp_path / "plots"

        result = run_comparison(pipeline_config, model_names=["lda"], plots_dir=plots_dir)

        assert [p.name for p in result.plot_paths] == ["roc_curves.png", "pr_curves.png"]
        for path in result.plot_paths:
            assert path.exists()
            assert path.stat().st_size > 0

    def test_mlflow_tracking(self, pipeline_config) -> None:
        """Test a tracked run logs a parent run and one nested run per model."""
        with patch("tumorclass.evaluation.experiment.mlflow") as mock_mlflow:
            run = mock_mlflow.start_run.return_value.__enter__.return_value
            run.info.run_id = "abc123"

            result = run_comparison(pipeline_config, model_names=["lda", "qda"], track=True)

        assert result.run_id == "abc123"
        mock_mlflow.set_experiment.assert_called_once_with("test-biopsy")
        nested = [
            c for c in mock_mlflow.start_run.call_args_list if c.kwargs.get("nested")
        ]
        assert [c.kwargs["run_name"] for c in nested] == ["eval-lda", "eval-qda"]

    def test_tracking_follows_config(self, pipeline_config) -> None:
        """Test tracking stays off when disabled in config."""
        with patch("tumorclass.evaluation.experiment.mlflow") as mock_mlflow:
            result = run_comparison(pipeline_config, model_names=["lda"])

        assert result.run_id is None
        mock_mlflow.start_run.assert_not_called()

    def test_unknown_model(self, pipeline_config) -> None:
        """Test an unknown model name aborts the run."""
        with pytest.raises(KeyError):
            run_comparison(pipeline_config, model_names=["gbm"])

    def test_bad_label_aborts(self, pipeline_config, raw_records, data_file) -> None:
        """Test an unexpected label code stops the run before training."""
        raw_records.loc[10, "class"] = "3"
        raw_records.to_csv(data_file, header=False, index=False)

        with pytest.raises(LabelCodeError):
            run_comparison(pipeline_config)
