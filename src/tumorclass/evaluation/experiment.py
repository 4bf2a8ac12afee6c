"""
MLflow experiment tracking.

Records a comparison run: one parent run with the split parameters and
one nested run per model with its hyperparameters and test metrics.
"""

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import mlflow

from tumorclass.config.settings import PipelineConfig
from tumorclass.evaluation.metrics import ClassificationMetrics
from tumorclass.utils.logging import get_logger

if TYPE_CHECKING:
    from tumorclass.evaluation.comparison import Ranking
    from tumorclass.modeling.data import Split
    from tumorclass.modeling.training import FittedModel

log = get_logger(__name__)


class ComparisonExperiment:
    """
    MLflow experiment for a model comparison run.

    Question: Which classifier separates the classes best on held-out data?
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize experiment.

        Args:
            config: Pipeline configuration.
        """
        self.config = config
        self._run_id: str | None = None

    def setup(self) -> None:
        """Setup MLflow experiment."""
        mlflow.set_tracking_uri(self.config.mlflow.tracking_uri)
        mlflow.set_experiment(self.config.experiment_name)

        log.info(
            "Experiment setup",
            name=self.config.experiment_name,
            tracking_uri=self.config.mlflow.tracking_uri,
        )

    def log_comparison(
        self,
        split: "Split",
        models: dict[str, "FittedModel"],
        results: dict[str, ClassificationMetrics],
        ranking: "Ranking",
        artifacts: list[Path] | None = None,
    ) -> str:
        """
        Log a full comparison as one parent run with nested model runs.

        Args:
            split: Train/test partition used.
            models: Fitted models.
            results: Test metrics per model.
            ranking: Model ranking.
            artifacts: Optional files (e.g. plots) to attach.

        Returns:
            Parent run ID.
        """
        self.setup()

        tags = {
            "experiment_type": "model_comparison",
            "project": self.config.project,
            "ranking_metric": ranking.metric.value,
            "best_model": ranking.best,
        }

        run_name = f"comparison-{datetime.now():%Y%m%d-%H%M}"
        with mlflow.start_run(run_name=run_name, tags=tags) as run:
            self._run_id = run.info.run_id
            log.info("Started MLflow run", run_id=self._run_id)

            mlflow.log_params(
                {
                    "n_train_samples": len(split.train),
                    "n_test_samples": len(split.test),
                    "n_features": len(split.feature_names),
                    "n_models": len(models),
                    "train_fraction": self.config.split.train_fraction,
                    "split_seed": split.random_state,
                    "cv_folds": self.config.training.cv_folds,
                    "threshold": self.config.evaluation.threshold,
                }
            )

            for name, fitted in models.items():
                with mlflow.start_run(run_name=f"eval-{name}", nested=True):
                    mlflow.set_tag("model_name", name)
                    mlflow.log_params(_model_params(fitted))
                    mlflow.log_metrics(
                        {
                            **results[name].to_dict(),
                            "cv_score": fitted.cv_score,
                            "training_time_s": fitted.training_time_s,
                        }
                    )

            for path in artifacts or []:
                mlflow.log_artifact(str(path))

        log.info("Ended MLflow run", run_id=self._run_id)
        return self._run_id


def _model_params(fitted: "FittedModel") -> dict[str, Any]:
    """Parameters of the final estimator, plus selected hyperparameters."""
    params: dict[str, Any] = {
        k: v
        for k, v in fitted.pipeline.named_steps["model"].get_params().items()
        if isinstance(v, (int, float, str, bool)) or v is None
    }
    if fitted.best_params:
        params.update(fitted.best_params)
    return params
