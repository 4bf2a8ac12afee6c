"""
Comparison pipeline implementation.

Runs Data Loader -> Partitioner -> Model Trainer -> Evaluator -> Comparator
once, sequentially. Each model is fit once on the training subset and
queried read-only against the test subset.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from tumorclass.config.settings import PipelineConfig
from tumorclass.evaluation.comparison import Ranking, rank_models
from tumorclass.evaluation.metrics import ClassificationMetrics, evaluate
from tumorclass.ingestion.loader import (
    DatasetSummary,
    DelimitedDatasetLoader,
    describe_dataset,
)
from tumorclass.modeling.data import Split, partition
from tumorclass.modeling.training import FittedModel, ModelTrainer
from tumorclass.utils.logging import get_logger, log_context

log = get_logger(__name__)


@dataclass
class ComparisonResult:
    """
    Result of a comparison run.

    Attributes:
        dataset: Cleaned dataset.
        summary: Dataset summary (counts, dropped rows, class balance).
        split: Train/test partition.
        models: Fitted models by name.
        results: Test metrics by model name.
        ranking: Total ordering of the models.
        plot_paths: Saved curve plots (if requested).
        run_id: MLflow run ID (if tracked).
    """

    dataset: pd.DataFrame
    summary: DatasetSummary
    split: Split
    models: dict[str, FittedModel]
    results: dict[str, ClassificationMetrics]
    ranking: Ranking
    plot_paths: list[Path] = field(default_factory=list)
    run_id: str | None = None


class ComparisonPipeline:
    """
    Pipeline comparing binary classifiers on one labelled dataset.
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize comparison pipeline.

        Args:
            config: Pipeline configuration.
        """
        self.config = config

    def run(
        self,
        model_names: list[str] | None = None,
        *,
        plots_dir: Path | None = None,
        track: bool | None = None,
    ) -> ComparisonResult:
        """
        Run the full comparison.

        Args:
            model_names: Models to compare (default: from config).
            plots_dir: Directory for ROC/PR plots; None skips plotting.
            track: Log to MLflow (default: config.mlflow.enabled).

        Returns:
            ComparisonResult.

        Raises:
            FileNotFoundError: If the data file is missing.
            LabelCodeError: If the label holds an unexpected code.
            MalformedRowError: If an attribute holds a non-numeric token.
            ModelFitError: If a model cannot be fitted.
        """
        cfg = self.config
        names = model_names if model_names is not None else cfg.models.enabled

        with log_context(project=cfg.project):
            log.info("Step 1: Loading dataset")
            loader = DelimitedDatasetLoader(cfg.dataset)
            dataset = loader.load()
            summary = describe_dataset(
                dataset, cfg.dataset.label_column, n_raw=loader.n_raw
            )

            log.info("Step 2: Partitioning")
            split = partition(
                dataset,
                cfg.split.train_fraction,
                cfg.dataset.label_column,
                positive_class=cfg.dataset.positive_class,
                random_state=cfg.split.random_state,
            )

            log.info("Step 3: Training models")
            models = ModelTrainer(cfg).train(split.X_train, split.y_train, names)

            log.info("Step 4: Evaluating on test subset")
            results = self._evaluate(models, split)

            log.info("Step 5: Ranking")
            ranking = rank_models(
                results,
                cfg.evaluation.ranking_metric,
                cfg.evaluation.imbalance_threshold,
            )

            plot_paths: list[Path] = []
            if plots_dir is not None:
                from tumorclass.evaluation.report import save_curve_plots

                plot_paths = list(save_curve_plots(results, plots_dir))

            run_id = None
            if track is None:
                track = cfg.mlflow.enabled
            if track:
                from tumorclass.evaluation.experiment import ComparisonExperiment

                run_id = ComparisonExperiment(cfg).log_comparison(
                    split, models, results, ranking, artifacts=plot_paths
                )

            log.info("Comparison complete", best=ranking.best)

        return ComparisonResult(
            dataset=dataset,
            summary=summary,
            split=split,
            models=models,
            results=results,
            ranking=ranking,
            plot_paths=plot_paths,
            run_id=run_id,
        )

    def _evaluate(
        self,
        models: dict[str, FittedModel],
        split: Split,
    ) -> dict[str, ClassificationMetrics]:
        """Evaluate every fitted model on the test subset."""
        results: dict[str, ClassificationMetrics] = {}
        y_test = split.y_test.to_numpy()

        for name, fitted in models.items():
            proba = fitted.predict_proba(split.X_test)
            metrics = evaluate(
                y_test,
                proba,
                threshold=self.config.evaluation.threshold,
                confidence=self.config.evaluation.confidence_level,
            )
            results[name] = metrics
            log.info(f"Model {name}: {metrics}")

        return results


def run_comparison(
    config: PipelineConfig,
    *,
    model_names: list[str] | None = None,
    plots_dir: Path | None = None,
    track: bool | None = None,
) -> ComparisonResult:
    """
    Convenience function to run the comparison pipeline.

    Args:
        config: Pipeline configuration.
        model_names: Models to compare (default: from config).
        plots_dir: Directory for ROC/PR plots; None skips plotting.
        track: Log to MLflow (default: config.mlflow.enabled).

    Returns:
        ComparisonResult with fitted models, metrics and ranking.
    """
    pipeline = ComparisonPipeline(config)
    return pipeline.run(model_names, plots_dir=plots_dir, track=track)
