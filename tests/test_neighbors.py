"""Tests for the plain KNN vote on the six-observation example."""

import math

import numpy as np
import pytest

from tumorclass.modeling.neighbors import (
    TOY_OBSERVATIONS,
    distance_table,
    knn_predict,
    neighbor_distances,
)

PREDICTORS = TOY_OBSERVATIONS[["X1", "X2", "X3"]]
RESPONSE = TOY_OBSERVATIONS["Y"]
ORIGIN = [0, 0, 0]


class TestNeighborDistances:
    """Tests for neighbor_distances."""

    def test_distances_to_origin(self) -> None:
        """Test Euclidean distances of the six observations."""
        distances = neighbor_distances(PREDICTORS, ORIGIN)

        expected = [3.0, 2.0, math.sqrt(10), math.sqrt(5), math.sqrt(2), math.sqrt(3)]
        np.testing.assert_allclose(distances, expected)

    def test_dimension_mismatch(self) -> None:
        """Test a query with the wrong number of coordinates."""
        with pytest.raises(ValueError, match="coordinates"):
            neighbor_distances(PREDICTORS, [0, 0])


class TestKnnPredict:
    """Tests for knn_predict."""

    def test_k1_is_green(self) -> None:
        """Test the single nearest neighbour is observation 5."""
        assert knn_predict(PREDICTORS, RESPONSE, ORIGIN, 1) == "Green"

    def test_k3_is_red(self) -> None:
        """Test observations 5, 6 and 2 vote Red."""
        assert knn_predict(PREDICTORS, RESPONSE, ORIGIN, 3) == "Red"

    def test_tie_goes_to_closest_class(self) -> None:
        """Test a 1-1 vote resolves to the class of the nearest record."""
        assert knn_predict(PREDICTORS, RESPONSE, ORIGIN, 2) == "Green"
        assert knn_predict(PREDICTORS, RESPONSE, ORIGIN, 4) == "Green"

    def test_all_records(self) -> None:
        """Test k = n returns the overall majority."""
        assert knn_predict(PREDICTORS, RESPONSE, ORIGIN, 6) == "Red"

    @pytest.mark.parametrize("k", [0, 7, -1])
    def test_invalid_k(self, k) -> None:
        """Test k outside 1..n is rejected."""
        with pytest.raises(ValueError, match="k must be"):
            knn_predict(PREDICTORS, RESPONSE, ORIGIN, k)

    def test_other_query(self) -> None:
        """Test a query next to observation 1."""
        assert knn_predict(PREDICTORS, RESPONSE, [0, 3, 0], 1) == "Red"


class TestDistanceTable:
    """Tests for distance_table."""

    def test_sorted_closest_first(self) -> None:
        """Test rows are ordered by distance."""
        table = distance_table(TOY_OBSERVATIONS, ORIGIN)

        assert list(table.index) == [5, 6, 2, 4, 1, 3]
        assert table["distance"].is_monotonic_increasing
        assert list(table.columns) == ["X1", "X2", "X3", "Y", "distance"]
