"""Exception types raised by the classification workflow."""

from typing import Any


class TumorclassError(Exception):
    """Base class for all workflow errors."""


class LabelCodeError(TumorclassError):
    """Raised when the label column holds a code outside the expected set."""

    def __init__(self, column: str, unexpected: list[Any], expected: list[Any]) -> None:
        self.column = column
        self.unexpected = unexpected
        self.expected = expected
        msg = (
            f"Label column '{column}' contains unexpected codes {unexpected}; "
            f"expected one of {expected}"
        )
        super().__init__(msg)


class MalformedRowError(TumorclassError):
    """Raised when an attribute value is neither numeric nor the missing sentinel."""

    def __init__(self, column: str, rows: list[int], values: list[Any]) -> None:
        self.column = column
        self.rows = rows
        self.values = values
        msg = (
            f"Column '{column}' has non-numeric values {values} "
            f"in rows {rows}"
        )
        super().__init__(msg)


class ModelFitError(TumorclassError):
    """Raised when a model cannot be fitted, e.g. a degenerate covariance."""

    def __init__(self, model_name: str, reason: str) -> None:
        self.model_name = model_name
        self.reason = reason
        super().__init__(f"Fitting '{model_name}' failed: {reason}")
