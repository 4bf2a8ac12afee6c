"""
Model ranking.

Orders evaluated models by ROC area, or by precision-recall area when the
test labels are imbalanced, with ties broken by accuracy and then name so
the ordering is total.
"""

from dataclasses import dataclass

import pandas as pd

from tumorclass.config.settings import RankingMetric
from tumorclass.evaluation.metrics import ClassificationMetrics
from tumorclass.modeling.models import model_label
from tumorclass.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class Ranking:
    """
    Total ordering of evaluated models.

    Attributes:
        table: One row per model indexed by rank (1 = best).
        metric: Metric that decided the primary order.
    """

    table: pd.DataFrame
    metric: RankingMetric

    @property
    def order(self) -> list[str]:
        """Model names, best first."""
        return self.table["model"].tolist()

    @property
    def best(self) -> str:
        """Name of the top-ranked model."""
        return self.order[0]


def resolve_ranking_metric(
    metric: RankingMetric | str,
    positive_rate: float,
    imbalance_threshold: float = 0.35,
) -> RankingMetric:
    """
    Pick the concrete ranking metric.

    Args:
        metric: Requested metric; AUTO defers to the label balance.
        positive_rate: Share of positive labels in the test subset.
        imbalance_threshold: Minority share below which labels count as
            imbalanced.

    Returns:
        ROC_AUC or PR_AUC.
    """
    metric = RankingMetric(metric)
    if metric is not RankingMetric.AUTO:
        return metric

    minority = min(positive_rate, 1.0 - positive_rate)
    return RankingMetric.PR_AUC if minority < imbalance_threshold else RankingMetric.ROC_AUC


def rank_models(
    results: dict[str, ClassificationMetrics],
    metric: RankingMetric | str = RankingMetric.AUTO,
    imbalance_threshold: float = 0.35,
) -> Ranking:
    """
    Rank models by area under curve with accuracy as tie-breaker.

    Args:
        results: Model name -> test metrics.
        metric: Ranking metric (auto, roc_auc or pr_auc).
        imbalance_threshold: Used when metric is auto.

    Returns:
        Ranking with a table indexed by rank (1 = best).

    Raises:
        ValueError: If results is empty.
    """
    if not results:
        msg = "No model results to rank"
        raise ValueError(msg)

    first = next(iter(results.values()))
    chosen = resolve_ranking_metric(metric, first.positive_rate, imbalance_threshold)

    rows = []
    for name, m in results.items():
        row = {"model": name, "label": model_label(name)}
        row.update(m.to_dict())
        rows.append(row)

    df = pd.DataFrame(rows)
    df = df.sort_values(
        by=[chosen.value, "accuracy", "model"],
        ascending=[False, False, True],
        kind="mergesort",
    ).reset_index(drop=True)
    df.insert(0, "rank", range(1, len(df) + 1))

    log.info(
        "Ranked models",
        metric=chosen.value,
        order=df["model"].tolist(),
    )
    return Ranking(table=df.set_index("rank"), metric=chosen)
