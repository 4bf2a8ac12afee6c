"""Command-line interface for the tumorclass comparison workflow."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="tumorclass",
    help="Compare binary classifiers on labelled tabular data.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON lines."),
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    from tumorclass.utils.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logs)


@app.command()
def compare(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ],
    model: Annotated[
        list[str] | None,
        typer.Option(
            "--model",
            "-m",
            help="Model to compare (repeatable). Compares all from config if not specified.",
        ),
    ] = None,
    plots: Annotated[
        bool,
        typer.Option("--plots", help="Save ROC and PR curve overlays."),
    ] = False,
    plots_dir: Annotated[
        Path | None,
        typer.Option(
            "--plots-dir",
            help="Directory for plots. Default: output/{project}/plots.",
        ),
    ] = None,
    mlflow: Annotated[
        bool | None,
        typer.Option(
            "--mlflow/--no-mlflow",
            help="Log the run to MLflow. Default: mlflow.enabled from config.",
        ),
    ] = None,
) -> None:
    """Train, evaluate and rank the configured classifiers."""
    from pydantic import ValidationError

    from tumorclass.config.loader import load_config
    from tumorclass.evaluation.report import dataset_table, print_comparison
    from tumorclass.exceptions import TumorclassError
    from tumorclass.workflow import run_comparison

    console.print(f"[blue]Loading configuration from {config}[/blue]")
    try:
        pipeline_config = load_config(config)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    if plots and plots_dir is None:
        plots_dir = pipeline_config.plots_dir

    try:
        result = run_comparison(
            pipeline_config,
            model_names=model,
            plots_dir=plots_dir,
            track=mlflow,
        )
    except (FileNotFoundError, KeyError, ValueError, TumorclassError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print()
    console.print(dataset_table(result.summary))

    split_table = Table(title="Partition")
    split_table.add_column("Subset", style="cyan")
    split_table.add_column("Records", style="green", justify="right")
    split_table.add_column(f"% {pipeline_config.dataset.positive_class}", justify="right")
    proportions = result.split.class_proportions()
    split_table.add_row("Training", str(len(result.split.train)), f"{proportions['train']:.1%}")
    split_table.add_row("Test", str(len(result.split.test)), f"{proportions['test']:.1%}")
    console.print(split_table)

    knn = result.models.get("knn")
    if knn is not None and knn.best_params:
        console.print(
            f"[dim]KNN neighbours selected by {pipeline_config.training.cv_folds}-fold CV: "
            f"{knn.best_params['model__n_neighbors']} "
            f"(CV {pipeline_config.training.scoring} {knn.cv_score:.4f})[/dim]"
        )

    console.print()
    print_comparison(
        console,
        result.results,
        result.ranking,
        pipeline_config.dataset.class_names,
    )

    console.print(f"\n[green]Best model: {result.ranking.best}[/green]")
    for path in result.plot_paths:
        console.print(f"[green]Saved plot: {path}[/green]")
    if result.run_id:
        console.print(f"[dim]MLflow run: {result.run_id}[/dim]")


@app.command()
def describe(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ],
) -> None:
    """Load and clean the dataset, then summarise it."""
    from tumorclass.config.loader import load_config
    from tumorclass.evaluation.report import dataset_table
    from tumorclass.exceptions import TumorclassError
    from tumorclass.ingestion.loader import DelimitedDatasetLoader, describe_dataset

    try:
        pipeline_config = load_config(config)
        loader = DelimitedDatasetLoader(pipeline_config.dataset)
        dataset = loader.load()
    except (FileNotFoundError, ValueError, TumorclassError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    summary = describe_dataset(
        dataset, pipeline_config.dataset.label_column, n_raw=loader.n_raw
    )
    console.print(dataset_table(summary, title=f"Dataset: {pipeline_config.dataset.path.name}"))

    console.print("\n[blue]Attributes:[/blue]")
    for col in dataset.columns:
        if col == pipeline_config.dataset.label_column:
            continue
        console.print(
            f"  {col}: mean {dataset[col].mean():.2f}, "
            f"range {dataset[col].min():g} - {dataset[col].max():g}"
        )


@app.command("knn-toy")
def knn_toy(
    k: Annotated[
        list[int] | None,
        typer.Option("--k", "-k", help="Neighbour count (repeatable). Default: 1 and 3."),
    ] = None,
    x1: Annotated[float, typer.Option("--x1", help="Query X1.")] = 0.0,
    x2: Annotated[float, typer.Option("--x2", help="Query X2.")] = 0.0,
    x3: Annotated[float, typer.Option("--x3", help="Query X3.")] = 0.0,
) -> None:
    """Classify a point against the six-observation textbook example."""
    from tumorclass.modeling.neighbors import (
        TOY_OBSERVATIONS,
        distance_table,
        knn_predict,
    )

    query = [x1, x2, x3]
    table = Table(title=f"Distances to ({x1:g}, {x2:g}, {x3:g})")
    table.add_column("Obs", justify="right")
    table.add_column("X1", justify="right")
    table.add_column("X2", justify="right")
    table.add_column("X3", justify="right")
    table.add_column("Y", style="cyan")
    table.add_column("Distance", justify="right", style="green")

    for obs, row in distance_table(TOY_OBSERVATIONS, query).iterrows():
        table.add_row(
            str(obs),
            f"{row['X1']:g}",
            f"{row['X2']:g}",
            f"{row['X3']:g}",
            row["Y"],
            f"{row['distance']:.4f}",
        )
    console.print(table)

    predictors = TOY_OBSERVATIONS[["X1", "X2", "X3"]]
    for neighbours in k or [1, 3]:
        try:
            predicted = knn_predict(predictors, TOY_OBSERVATIONS["Y"], query, neighbours)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1) from e
        console.print(f"K={neighbours}: [bold]{predicted}[/bold]")


@app.command()
def models() -> None:
    """List available model variants."""
    from tumorclass.modeling.models import list_models, model_label

    table = Table(title="Available models")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="green")
    for name in list_models():
        table.add_row(name, model_label(name))
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from tumorclass import __version__

    console.print(f"tumorclass version {__version__}")


if __name__ == "__main__":
    app()
