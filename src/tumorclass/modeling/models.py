"""
Model registry and factory.

Provides the registry of supported classifiers with their default
configurations and the hyperparameter grids searched during training.
"""

from typing import Any

from sklearn.base import BaseEstimator
from sklearn.discriminant_analysis import (
    LinearDiscriminantAnalysis,
    QuadraticDiscriminantAnalysis,
)
from sklearn.linear_model import LogisticRegression
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier

from tumorclass.utils.logging import get_logger

log = get_logger(__name__)


# Model configurations: name -> (class, default_kwargs)
MODEL_REGISTRY: dict[str, tuple[type[BaseEstimator], dict[str, Any]]] = {
    # Near-zero penalty, close to a plain binomial GLM
    "logistic_regression": (
        LogisticRegression,
        {"C": 1e6, "max_iter": 1000},
    ),
    "knn": (KNeighborsClassifier, {"n_neighbors": 5}),
    "lda": (LinearDiscriminantAnalysis, {}),
    "qda": (QuadraticDiscriminantAnalysis, {}),
    "naive_bayes": (GaussianNB, {}),
}

# Display names for reports
MODEL_LABELS: dict[str, str] = {
    "logistic_regression": "Logistic Regression",
    "knn": "K-Nearest Neighbors",
    "lda": "Linear Discriminant Analysis",
    "qda": "Quadratic Discriminant Analysis",
    "naive_bayes": "Naive Bayes",
}


def get_model(name: str, **kwargs: Any) -> BaseEstimator:
    """
    Get a model instance by name.

    Args:
        name: Model name from registry.
        **kwargs: Override default parameters.

    Returns:
        Model instance.

    Raises:
        KeyError: If model not found.
    """
    if name not in MODEL_REGISTRY:
        available = ", ".join(MODEL_REGISTRY.keys())
        msg = f"Unknown model '{name}'. Available: {available}"
        raise KeyError(msg)

    model_class, default_kwargs = MODEL_REGISTRY[name]
    params = {**default_kwargs, **kwargs}

    log.debug("Creating model", name=name, params=params)
    return model_class(**params)


def get_param_grid(
    name: str,
    *,
    knn_neighbors: list[int] | None = None,
) -> dict[str, list[Any]] | None:
    """
    Get the hyperparameter grid for a model.

    Only the neighbour count of KNN is tuned; the other variants have
    no free hyperparameters in this workflow.

    Args:
        name: Model name.
        knn_neighbors: Candidate neighbour counts (default 1..25).

    Returns:
        Parameter grid keyed by pipeline step, or None if not tuned.
    """
    if name == "knn":
        candidates = knn_neighbors if knn_neighbors is not None else list(range(1, 26))
        return {"model__n_neighbors": list(candidates)}
    return None


def list_models() -> list[str]:
    """List all available model names."""
    return list(MODEL_REGISTRY.keys())


def model_label(name: str) -> str:
    """Human-readable name for a registered model."""
    return MODEL_LABELS.get(name, name)
