"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Minimal configs only need: project, data.path
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from tumorclass.config.settings import (
    DatasetConfig,
    EvaluationConfig,
    MLflowConfig,
    ModelConfig,
    OutputConfig,
    PipelineConfig,
    RankingMetric,
    SplitConfig,
    TrainingConfig,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def _only_set(data: dict[str, Any], keys: list[str]) -> dict[str, Any]:
    """Keep the keys present in data so model defaults apply to the rest."""
    return {k: data[k] for k in keys if data.get(k) is not None}


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> PipelineConfig:
    """
    Load workflow configuration from YAML file(s).

    Minimal config requires only:
        - project: str
        - data.path: path to the delimited data file

    Relative data paths are resolved against the config file's directory.

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated PipelineConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)
    merged = _deep_merge(base_data, main_data)

    # Label codes replace the inherited mapping as a whole
    main_codes = main_data.get("data", {}).get("label", {}).get("codes")
    if main_codes:
        merged["data"]["label"]["codes"] = main_codes

    project = merged.get("project")
    if not project:
        msg = "Config must specify 'project' name"
        raise ValueError(msg)

    data_data = merged.get("data", {})
    data_path = data_data.get("path")
    if not data_path:
        msg = "Config must specify 'data.path'"
        raise ValueError(msg)
    data_path = Path(data_path)
    if not data_path.is_absolute():
        data_path = config_path.parent / data_path

    # Label settings live under data.label in YAML
    label_data = data_data.get("label", {})
    label_kwargs: dict[str, Any] = {}
    if label_data.get("column"):
        label_kwargs["label_column"] = label_data["column"]
    if label_data.get("codes"):
        label_kwargs["label_codes"] = label_data["codes"]
    if label_data.get("positive_class"):
        label_kwargs["positive_class"] = label_data["positive_class"]

    dataset = DatasetConfig(
        path=data_path,
        **_only_set(
            data_data,
            [
                "delimiter",
                "has_header",
                "columns",
                "missing_token",
                "id_columns",
                "drop_columns",
            ],
        ),
        **label_kwargs,
    )

    split = SplitConfig(
        **_only_set(merged.get("split", {}), ["train_fraction", "random_state"])
    )

    training = TrainingConfig(
        **_only_set(
            merged.get("training", {}),
            ["cv_folds", "random_state", "scoring", "knn_neighbors"],
        )
    )

    models_data = merged.get("models", {})
    models = ModelConfig(**_only_set(models_data, ["enabled", "hyperparameters"]))

    eval_data = merged.get("evaluation", {})
    evaluation = EvaluationConfig(
        **_only_set(eval_data, ["threshold", "confidence_level", "imbalance_threshold"]),
        ranking_metric=RankingMetric(eval_data.get("ranking_metric", "auto")),
    )

    mlflow_data = merged.get("mlflow", {})
    mlflow = MLflowConfig(
        **_only_set(mlflow_data, ["enabled", "tracking_uri", "experiment_name"])
    )

    output_data = merged.get("output", {})
    output = OutputConfig(
        output_root=Path(output_data.get("root", "./output")),
    )

    return PipelineConfig(
        project=project,
        dataset=dataset,
        split=split,
        training=training,
        models=models,
        evaluation=evaluation,
        mlflow=mlflow,
        output=output,
    )
