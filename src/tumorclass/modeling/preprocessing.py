"""
Preprocessing pipeline construction.

Builds the sklearn ColumnTransformer placed in front of every model.
Because it lives inside the model Pipeline, scaling statistics are fit
on training rows only and reapplied unchanged to test rows.
"""

import numpy as np
from sklearn.compose import ColumnTransformer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from tumorclass.utils.logging import get_logger

log = get_logger(__name__)


def build_preprocessor(numeric_features: list[str]) -> ColumnTransformer:
    """
    Build a standardising ColumnTransformer.

    All numeric predictors are scaled to zero mean and unit variance.

    Args:
        numeric_features: Predictor column names.

    Returns:
        Unfitted ColumnTransformer.
    """
    if not numeric_features:
        msg = "At least one numeric feature is required"
        raise ValueError(msg)

    preprocessor = ColumnTransformer(
        transformers=[("standard", StandardScaler(), list(numeric_features))],
        remainder="drop",  # Drop columns not explicitly handled
    )

    log.debug("Built preprocessor", n_features=len(numeric_features))
    return preprocessor


def scaling_parameters(pipeline: Pipeline) -> tuple[np.ndarray, np.ndarray]:
    """
    Read the fitted standardisation parameters from a model pipeline.

    Args:
        pipeline: Fitted Pipeline with a 'preprocessor' step.

    Returns:
        Tuple of (means, scales) per feature.
    """
    scaler: StandardScaler = pipeline.named_steps["preprocessor"].named_transformers_[
        "standard"
    ]
    return scaler.mean_, scaler.scale_
