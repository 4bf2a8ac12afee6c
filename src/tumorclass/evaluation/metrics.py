"""
Evaluation metrics for binary classifiers.

Point metrics use a fixed probability threshold; ROC and precision-recall
curves sweep every threshold and are reduced to areas by the
trapezoidal rule.
"""

from dataclasses import dataclass

import numpy as np
from scipy.stats import beta
from sklearn.metrics import auc, confusion_matrix, precision_recall_curve, roc_curve

from tumorclass.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_THRESHOLD = 0.5


@dataclass(frozen=True, eq=False)
class Curve:
    """
    A threshold-swept trade-off curve.

    Attributes:
        x: Horizontal coordinates (FPR for ROC, recall for PR).
        y: Vertical coordinates (TPR for ROC, precision for PR).
        thresholds: Score thresholds producing each point.
        area: Trapezoidal area under the curve.
    """

    x: np.ndarray
    y: np.ndarray
    thresholds: np.ndarray
    area: float


@dataclass(frozen=True, eq=False)
class ClassificationMetrics:
    """
    Evaluation of one fitted model on the test subset.

    Attributes:
        tn, fp, fn, tp: Confusion matrix cells at the threshold.
        accuracy: (tp + tn) / n_samples
        accuracy_ci: Clopper-Pearson interval for accuracy.
        sensitivity: tp / (tp + fn), true-positive rate
        specificity: tn / (tn + fp), true-negative rate
        precision: tp / (tp + fp), 0 when nothing is predicted positive
        roc: ROC curve with area.
        pr: Precision-recall curve with area.
        threshold: Probability threshold for point metrics.
        confidence_level: Coverage of accuracy_ci.
        n_samples: Number of test records.
    """

    tn: int
    fp: int
    fn: int
    tp: int
    accuracy: float
    accuracy_ci: tuple[float, float]
    sensitivity: float
    specificity: float
    precision: float
    roc: Curve
    pr: Curve
    threshold: float
    confidence_level: float
    n_samples: int

    @property
    def roc_auc(self) -> float:
        """Area under the ROC curve."""
        return self.roc.area

    @property
    def pr_auc(self) -> float:
        """Area under the precision-recall curve."""
        return self.pr.area

    @property
    def positive_rate(self) -> float:
        """Share of positive labels in the evaluated records."""
        return (self.tp + self.fn) / self.n_samples

    def confusion_matrix(self) -> np.ndarray:
        """2x2 matrix, rows = actual (neg, pos), columns = predicted."""
        return np.array([[self.tn, self.fp], [self.fn, self.tp]])

    def to_dict(self) -> dict[str, float]:
        """Convert scalar metrics to a dictionary."""
        return {
            "accuracy": self.accuracy,
            "accuracy_ci_lower": self.accuracy_ci[0],
            "accuracy_ci_upper": self.accuracy_ci[1],
            "sensitivity": self.sensitivity,
            "specificity": self.specificity,
            "precision": self.precision,
            "roc_auc": self.roc_auc,
            "pr_auc": self.pr_auc,
            "tn": self.tn,
            "fp": self.fp,
            "fn": self.fn,
            "tp": self.tp,
            "n_samples": self.n_samples,
        }

    def __str__(self) -> str:
        """String representation."""
        lo, hi = self.accuracy_ci
        return (
            f"Acc={self.accuracy:.4f} [{lo:.4f}, {hi:.4f}], "
            f"Sens={self.sensitivity:.4f}, Spec={self.specificity:.4f}, "
            f"ROC-AUC={self.roc_auc:.4f}, PR-AUC={self.pr_auc:.4f}"
        )


def accuracy_interval(
    successes: int,
    n: int,
    confidence: float = 0.95,
) -> tuple[float, float]:
    """
    Exact (Clopper-Pearson) binomial confidence interval.

    Args:
        successes: Number of correct predictions.
        n: Number of predictions.
        confidence: Coverage, e.g. 0.95.

    Returns:
        (lower, upper) bounds on the true accuracy.
    """
    if n <= 0:
        msg = f"n must be positive, got: {n}"
        raise ValueError(msg)
    if not 0 <= successes <= n:
        msg = f"successes must be between 0 and {n}, got: {successes}"
        raise ValueError(msg)

    alpha = 1.0 - confidence
    lower = 0.0 if successes == 0 else beta.ppf(alpha / 2, successes, n - successes + 1)
    upper = 1.0 if successes == n else beta.ppf(1 - alpha / 2, successes + 1, n - successes)
    return float(lower), float(upper)


def _safe_ratio(num: int, den: int) -> float:
    return num / den if den > 0 else 0.0


def roc(y_true: np.ndarray, scores: np.ndarray) -> Curve:
    """ROC curve over all thresholds with trapezoidal area."""
    fpr, tpr, thresholds = roc_curve(y_true, scores, drop_intermediate=False)
    return Curve(x=fpr, y=tpr, thresholds=thresholds, area=float(auc(fpr, tpr)))


def precision_recall(y_true: np.ndarray, scores: np.ndarray) -> Curve:
    """Precision-recall curve over all thresholds with trapezoidal area."""
    precision, recall, thresholds = precision_recall_curve(y_true, scores)
    return Curve(
        x=recall, y=precision, thresholds=thresholds, area=float(auc(recall, precision))
    )


def evaluate(
    y_true: np.ndarray,
    proba: np.ndarray,
    threshold: float = DEFAULT_THRESHOLD,
    confidence: float = 0.95,
) -> ClassificationMetrics:
    """
    Evaluate predicted positive-class probabilities against true labels.

    A record is predicted positive when its probability exceeds the
    threshold.

    Args:
        y_true: Binary labels (1 = positive class).
        proba: Predicted probability of the positive class.
        threshold: Decision threshold for point metrics.
        confidence: Coverage of the accuracy interval.

    Returns:
        ClassificationMetrics object.

    Raises:
        ValueError: If lengths differ, labels are not 0/1, or only one
            class is present (curves are undefined).
    """
    y_true = np.asarray(y_true).ravel().astype(int)
    proba = np.asarray(proba, dtype=float).ravel()

    if len(y_true) != len(proba):
        msg = f"Length mismatch: {len(y_true)} labels, {len(proba)} scores"
        raise ValueError(msg)
    if not set(np.unique(y_true)) <= {0, 1}:
        msg = f"Labels must be 0/1, got: {sorted(set(np.unique(y_true)))}"
        raise ValueError(msg)
    if len(np.unique(y_true)) < 2:
        msg = "Both classes must be present to evaluate ROC and PR curves"
        raise ValueError(msg)

    y_pred = (proba > threshold).astype(int)
    tn, fp, fn, tp = (int(v) for v in confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel())
    n = len(y_true)

    metrics = ClassificationMetrics(
        tn=tn,
        fp=fp,
        fn=fn,
        tp=tp,
        accuracy=(tp + tn) / n,
        accuracy_ci=accuracy_interval(tp + tn, n, confidence),
        sensitivity=_safe_ratio(tp, tp + fn),
        specificity=_safe_ratio(tn, tn + fp),
        precision=_safe_ratio(tp, tp + fp),
        roc=roc(y_true, proba),
        pr=precision_recall(y_true, proba),
        threshold=threshold,
        confidence_level=confidence,
        n_samples=n,
    )

    log.debug("Computed metrics", **metrics.to_dict())
    return metrics
