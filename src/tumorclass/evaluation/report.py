"""
Comparison report generation.

Renders console tables with rich and ROC / precision-recall overlays
with matplotlib.
"""

from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from rich.console import Console
from rich.table import Table

from tumorclass.evaluation.metrics import ClassificationMetrics
from tumorclass.modeling.models import model_label
from tumorclass.utils.logging import get_logger

if TYPE_CHECKING:
    from tumorclass.evaluation.comparison import Ranking
    from tumorclass.ingestion.loader import DatasetSummary

log = get_logger(__name__)


def dataset_table(summary: "DatasetSummary", title: str = "Dataset") -> Table:
    """Table with record counts and class balance."""
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Records", str(summary.n_rows))
    table.add_row("Attributes", str(summary.n_attributes))
    if summary.n_dropped is not None:
        table.add_row("Dropped (missing values)", str(summary.n_dropped))
    fractions = summary.class_fractions
    for name, count in summary.class_counts.items():
        table.add_row(f"Class '{name}'", f"{count} ({fractions[name]:.1%})")

    return table


def confusion_table(
    name: str,
    metrics: ClassificationMetrics,
    class_names: list[str],
) -> Table:
    """
    Confusion matrix for one model.

    Args:
        name: Model name.
        metrics: Test metrics of the model.
        class_names: [negative, positive] class names.
    """
    negative, positive = class_names
    table = Table(
        title=f"{model_label(name)} (threshold {metrics.threshold:g})",
        show_lines=True,
    )
    table.add_column("Actual \\ Predicted", style="cyan")
    table.add_column(negative, justify="right")
    table.add_column(positive, justify="right")
    table.add_row(negative, str(metrics.tn), str(metrics.fp))
    table.add_row(positive, str(metrics.fn), str(metrics.tp))
    return table


def ranking_table(ranking: "Ranking") -> Table:
    """Ranking of all models with point metrics and areas."""
    table = Table(title=f"Model ranking (by {ranking.metric.value})")
    table.add_column("Rank", justify="right")
    table.add_column("Model", style="cyan")
    table.add_column("Accuracy", justify="right")
    table.add_column("95% CI", justify="right")
    table.add_column("Sensitivity", justify="right")
    table.add_column("Specificity", justify="right")
    table.add_column("ROC AUC", justify="right", style="green")
    table.add_column("PR AUC", justify="right", style="green")

    for rank, row in ranking.table.iterrows():
        table.add_row(
            str(rank),
            row["label"],
            f"{row['accuracy']:.4f}",
            f"[{row['accuracy_ci_lower']:.3f}, {row['accuracy_ci_upper']:.3f}]",
            f"{row['sensitivity']:.4f}",
            f"{row['specificity']:.4f}",
            f"{row['roc_auc']:.4f}",
            f"{row['pr_auc']:.4f}",
        )

    return table


def print_comparison(
    console: Console,
    results: dict[str, ClassificationMetrics],
    ranking: "Ranking",
    class_names: list[str],
) -> None:
    """Print confusion matrices followed by the ranking table."""
    for name, metrics in results.items():
        console.print(confusion_table(name, metrics, class_names))
    console.print()
    console.print(ranking_table(ranking))


def plot_roc_curves(results: dict[str, ClassificationMetrics]) -> Figure:
    """Overlay of ROC curves with the chance diagonal."""
    fig, ax = plt.subplots(figsize=(6, 6))

    for name, m in results.items():
        ax.plot(m.roc.x, m.roc.y, label=f"{model_label(name)} (AUC={m.roc_auc:.3f})")

    ax.plot([0, 1], [0, 1], "k--", linewidth=1, label="Chance")
    ax.set_xlabel("False positive rate")
    ax.set_ylabel("True positive rate")
    ax.set_title("ROC curves")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1.02)
    ax.legend(loc="lower right", fontsize="small")
    fig.tight_layout()
    return fig


def plot_pr_curves(results: dict[str, ClassificationMetrics]) -> Figure:
    """Overlay of precision-recall curves with the no-skill baseline."""
    fig, ax = plt.subplots(figsize=(6, 6))

    baseline = None
    for name, m in results.items():
        ax.plot(m.pr.x, m.pr.y, label=f"{model_label(name)} (AUC={m.pr_auc:.3f})")
        baseline = m.positive_rate

    if baseline is not None:
        ax.axhline(baseline, color="k", linestyle="--", linewidth=1, label="No skill")
    ax.set_xlabel("Recall")
    ax.set_ylabel("Precision")
    ax.set_title("Precision-recall curves")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1.02)
    ax.legend(loc="lower left", fontsize="small")
    fig.tight_layout()
    return fig


def save_curve_plots(
    results: dict[str, ClassificationMetrics],
    output_dir: Path,
) -> tuple[Path, Path]:
    """
    Save ROC and PR overlays as PNG files.

    Args:
        results: Model name -> test metrics.
        output_dir: Directory for the images (created if missing).

    Returns:
        Tuple of (roc_path, pr_path).
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    roc_path = output_dir / "roc_curves.png"
    pr_path = output_dir / "pr_curves.png"

    for fig, path in (
        (plot_roc_curves(results), roc_path),
        (plot_pr_curves(results), pr_path),
    ):
        fig.savefig(path, dpi=150)
        plt.close(fig)

    log.info("Saved curve plots", roc=str(roc_path), pr=str(pr_path))
    return roc_path, pr_path
