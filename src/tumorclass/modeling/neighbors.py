"""
Plain K-nearest-neighbour vote.

A small, explicit KNN used for worked examples: Euclidean distances to a
query point, a majority vote among the k closest records, and ties
resolved in favour of the class whose member is closest to the query.
"""

from collections import Counter
from collections.abc import Sequence

import numpy as np
import pandas as pd

# Six observations with three predictors and a two-class response
TOY_OBSERVATIONS = pd.DataFrame(
    {
        "X1": [0, 2, 0, 0, -1, 1],
        "X2": [3, 0, 1, 1, 0, 1],
        "X3": [0, 0, 3, 2, 1, 1],
        "Y": ["Red", "Red", "Red", "Green", "Green", "Red"],
    },
    index=pd.RangeIndex(1, 7, name="obs"),
)


def neighbor_distances(
    X: pd.DataFrame | np.ndarray,
    query: Sequence[float],
) -> np.ndarray:
    """
    Euclidean distance of every record to the query point.

    Args:
        X: Records, one row per observation.
        query: Point to measure from.

    Returns:
        1-D array of distances in record order.
    """
    points = np.asarray(X, dtype=float)
    target = np.asarray(query, dtype=float)
    if points.ndim != 2 or points.shape[1] != target.shape[0]:
        msg = (
            f"Query has {target.shape[0]} coordinates, "
            f"records have shape {points.shape}"
        )
        raise ValueError(msg)
    return np.sqrt(((points - target) ** 2).sum(axis=1))


def knn_predict(
    X: pd.DataFrame | np.ndarray,
    y: Sequence[str] | pd.Series,
    query: Sequence[float],
    k: int,
) -> str:
    """
    Predict the class of a query point by majority vote of k neighbours.

    Records are ordered closest-first (stable, so equal distances keep
    record order). Among classes tied for the most votes, the one that
    appears first in that ordering wins.

    Args:
        X: Records, one row per observation.
        y: Class of each record.
        query: Point to classify.
        k: Number of neighbours, 1 <= k <= number of records.

    Returns:
        Predicted class.
    """
    labels = list(y)
    if not 1 <= k <= len(labels):
        msg = f"k must be between 1 and {len(labels)}, got: {k}"
        raise ValueError(msg)

    distances = neighbor_distances(X, query)
    order = np.argsort(distances, kind="stable")[:k]
    nearest = [labels[i] for i in order]

    votes = Counter(nearest)
    top = max(votes.values())
    # First class in closest-first order among those with the top count
    return next(label for label in nearest if votes[label] == top)


def distance_table(
    observations: pd.DataFrame,
    query: Sequence[float],
    response: str = "Y",
) -> pd.DataFrame:
    """
    Observations with their distance to the query, closest first.

    Args:
        observations: Predictors plus a response column.
        query: Point to measure from.
        response: Name of the response column.

    Returns:
        Copy of the observations with a 'distance' column, sorted.
    """
    predictors = observations.drop(columns=[response])
    table = observations.copy()
    table["distance"] = neighbor_distances(predictors, query)
    return table.sort_values("distance", kind="stable")
