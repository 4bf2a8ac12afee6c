"""
Model training functionality.

Fits each classifier inside a standardising pipeline. Model selection
for tuned variants runs stratified k-fold cross-validation on the
training subset only; the test subset never reaches this module.
"""

import time
import warnings
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
from sklearn.model_selection import GridSearchCV, StratifiedKFold, cross_val_score
from sklearn.pipeline import Pipeline

from tumorclass.config.settings import PipelineConfig
from tumorclass.exceptions import ModelFitError
from tumorclass.modeling.models import MODEL_REGISTRY, get_model, get_param_grid
from tumorclass.modeling.preprocessing import build_preprocessor
from tumorclass.utils.logging import get_logger

log = get_logger(__name__)

# Warnings that mean the fitted model is numerically unusable
_DEGENERATE_FIT_MESSAGES = r".*(collinear|not full rank|singular).*"


@dataclass
class FittedModel:
    """
    Container for a fitted model with metadata.

    Attributes:
        name: Model name.
        pipeline: Fitted sklearn pipeline (preprocessor + model).
        cv_score: Mean cross-validated score on the training subset.
        cv_std: Standard deviation of the fold scores.
        best_params: Selected hyperparameters (if tuned).
        cv_results: Mean validation score per candidate (if tuned).
        feature_names: Input feature names.
        training_time_s: Total training time in seconds.
    """

    name: str
    pipeline: Pipeline
    cv_score: float = float("nan")
    cv_std: float = float("nan")
    best_params: dict[str, Any] | None = None
    cv_results: dict[Any, float] = field(default_factory=dict)
    feature_names: list[str] = field(default_factory=list)
    training_time_s: float = 0.0

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        """Probability of the positive class (label 1) for each row."""
        classes = list(self.pipeline.classes_)
        return self.pipeline.predict_proba(X[self.feature_names])[:, classes.index(1)]


@contextmanager
def fit_errors(name: str) -> Iterator[None]:
    """Turn numerical failures inside the block into ModelFitError."""
    with warnings.catch_warnings():
        warnings.filterwarnings("error", message=_DEGENERATE_FIT_MESSAGES)
        try:
            yield
        except (np.linalg.LinAlgError, ValueError, Warning) as e:
            raise ModelFitError(name, str(e)) from e


class ModelTrainer:
    """
    Trainer for the binary classifiers under comparison.

    Handles preprocessing, model fitting, and neighbour-count selection.
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize trainer.

        Args:
            config: Pipeline configuration.
        """
        self.config = config
        self.models: dict[str, FittedModel] = {}

    def _cv(self) -> StratifiedKFold:
        return StratifiedKFold(
            n_splits=self.config.training.cv_folds,
            shuffle=True,
            random_state=self.config.training.random_state,
        )

    def train(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        model_names: list[str] | None = None,
    ) -> dict[str, FittedModel]:
        """
        Fit models on the training subset.

        Args:
            X: Training features.
            y: Binary training target (1 = positive class).
            model_names: Models to train (default: from config).

        Returns:
            Dictionary of fitted models, in training order.

        Raises:
            KeyError: If a model name is not registered.
            ModelFitError: If a model cannot be fitted.
        """
        if model_names is None:
            model_names = self.config.models.enabled

        unknown = [name for name in model_names if name not in MODEL_REGISTRY]
        if unknown:
            available = ", ".join(MODEL_REGISTRY.keys())
            msg = f"Unknown models {unknown}. Available: {available}"
            raise KeyError(msg)

        log.info(
            "Starting training",
            n_samples=len(X),
            n_features=X.shape[1],
            models=model_names,
        )

        for name in model_names:
            log.info("Training model", name=name)
            self.models[name] = self._train_single_model(X, y, name)

        log.info("Training complete", n_models=len(self.models))
        return self.models

    def _train_single_model(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        name: str,
    ) -> FittedModel:
        """Train a single model."""
        training_start = time.perf_counter()

        overrides = self.config.models.hyperparameters.get(name, {})
        pipeline = Pipeline(
            steps=[
                ("preprocessor", build_preprocessor(list(X.columns))),
                ("model", get_model(name, **overrides)),
            ]
        )

        cv = self._cv()
        scoring = self.config.training.scoring
        best_params = None
        cv_results: dict[Any, float] = {}

        grid = get_param_grid(name, knn_neighbors=self.config.training.knn_neighbors)
        if grid is not None:
            gs = GridSearchCV(
                pipeline,
                param_grid=grid,
                cv=cv,
                scoring=scoring,
                refit=True,
                error_score="raise",
            )
            with fit_errors(name):
                gs.fit(X, y)
            pipeline = gs.best_estimator_
            best_params = dict(gs.best_params_)
            cv_score = float(gs.best_score_)
            cv_std = float(gs.cv_results_["std_test_score"][gs.best_index_])
            param_key = next(iter(grid))
            cv_results = {
                params[param_key]: float(score)
                for params, score in zip(
                    gs.cv_results_["params"],
                    gs.cv_results_["mean_test_score"],
                    strict=True,
                )
            }
            log.info(
                "Model selection complete",
                name=name,
                best_params=best_params,
                cv_score=f"{cv_score:.4f}",
            )
        else:
            with fit_errors(name):
                scores = cross_val_score(
                    pipeline, X, y, cv=cv, scoring=scoring, error_score="raise"
                )
                pipeline.fit(X, y)
            cv_score = float(np.mean(scores))
            cv_std = float(np.std(scores))

        training_time_s = time.perf_counter() - training_start

        log.info(
            "Model fitted",
            name=name,
            cv_score=f"{cv_score:.4f}",
            training_time_s=f"{training_time_s:.3f}",
        )

        return FittedModel(
            name=name,
            pipeline=pipeline,
            cv_score=cv_score,
            cv_std=cv_std,
            best_params=best_params,
            cv_results=cv_results,
            feature_names=list(X.columns),
            training_time_s=training_time_s,
        )


def train_model(
    X: pd.DataFrame,
    y: pd.Series,
    config: PipelineConfig,
    model_name: str | None = None,
) -> FittedModel:
    """
    Convenience function to train a single model.

    Args:
        X: Training features.
        y: Binary training target.
        config: Pipeline configuration.
        model_name: Model to train (default: first in config).

    Returns:
        Fitted model.
    """
    trainer = ModelTrainer(config)

    if model_name is None:
        model_name = (
            config.models.enabled[0] if config.models.enabled else "logistic_regression"
        )

    models = trainer.train(X, y, [model_name])
    return models[model_name]
