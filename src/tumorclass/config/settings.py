"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
Column layout, label codes and split proportions are never hardcoded
in processing code.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Column order of the UCI breast-cancer-wisconsin.data file
BIOPSY_COLUMNS: list[str] = [
    "id",
    "clump_thickness",
    "cell_size_uniformity",
    "cell_shape_uniformity",
    "marginal_adhesion",
    "epithelial_cell_size",
    "bare_nuclei",
    "bland_chromatin",
    "normal_nucleoli",
    "mitoses",
    "class",
]


class RankingMetric(str, Enum):
    """Metric used to order models in the comparison."""

    AUTO = "auto"  # pr_auc for imbalanced test labels, roc_auc otherwise
    ROC_AUC = "roc_auc"
    PR_AUC = "pr_auc"


class DatasetConfig(BaseModel):
    """Raw data source and cleaning rules."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="Path to the delimited data file")
    delimiter: str = Field(default=",", min_length=1)
    has_header: bool = Field(
        default=False, description="Whether the first line holds column names"
    )
    columns: list[str] = Field(
        default_factory=lambda: list(BIOPSY_COLUMNS),
        description="Column order applied when the file has no header",
    )
    missing_token: str = Field(
        default="?", description="Sentinel token marking a missing value"
    )
    id_columns: list[str] = Field(
        default_factory=lambda: ["id"],
        description="Non-predictive identifier columns to remove",
    )
    drop_columns: list[str] = Field(
        default_factory=list,
        description="Redundant predictors removed before modeling",
    )
    label_column: str = Field(default="class")
    label_codes: dict[str, str] = Field(
        default_factory=lambda: {"2": "benign", "4": "malignant"},
        description="Raw label code -> class name",
    )
    positive_class: str = Field(default="malignant")

    @field_validator("label_codes", mode="before")
    @classmethod
    def stringify_codes(cls, v: Any) -> Any:
        """YAML reads bare codes as integers; keys are compared as strings."""
        if isinstance(v, dict):
            return {str(k): str(val) for k, val in v.items()}
        return v

    @field_validator("label_codes")
    @classmethod
    def validate_two_classes(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure the codes map onto exactly two class names."""
        classes = set(v.values())
        if len(classes) != 2:
            msg = f"label_codes must map to exactly two classes, got: {sorted(classes)}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_layout(self) -> "DatasetConfig":
        """Check the positive class and label column are consistent."""
        if self.positive_class not in self.label_codes.values():
            msg = (
                f"positive_class {self.positive_class!r} is not one of "
                f"{sorted(set(self.label_codes.values()))}"
            )
            raise ValueError(msg)
        if not self.has_header and self.label_column not in self.columns:
            msg = f"label_column {self.label_column!r} missing from columns"
            raise ValueError(msg)
        return self

    @property
    def class_names(self) -> list[str]:
        """Class names ordered negative first, positive second."""
        negative = next(c for c in self.label_codes.values() if c != self.positive_class)
        return [negative, self.positive_class]


class SplitConfig(BaseModel):
    """Train/test partition configuration."""

    model_config = ConfigDict(frozen=True)

    train_fraction: float = Field(default=0.7, gt=0.0, lt=1.0)
    random_state: int = Field(default=1)


class TrainingConfig(BaseModel):
    """Model training and model-selection configuration."""

    model_config = ConfigDict(frozen=True)

    cv_folds: int = Field(default=10, ge=2, le=20)
    random_state: int = Field(default=1)
    scoring: str = Field(default="accuracy", description="sklearn scorer for CV")
    knn_neighbors: list[int] = Field(
        default_factory=lambda: list(range(1, 26)),
        description="Candidate neighbour counts for KNN model selection",
    )

    @field_validator("knn_neighbors")
    @classmethod
    def validate_neighbors(cls, v: list[int]) -> list[int]:
        """Neighbour counts must be positive."""
        if not v:
            msg = "knn_neighbors must not be empty"
            raise ValueError(msg)
        if any(k < 1 for k in v):
            msg = f"knn_neighbors must be >= 1, got: {v}"
            raise ValueError(msg)
        return sorted(set(v))


class ModelConfig(BaseModel):
    """Model selection and hyperparameter configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: list[str] = Field(
        default_factory=lambda: [
            "logistic_regression",
            "knn",
            "lda",
            "qda",
            "naive_bayes",
        ],
        description="List of enabled model names",
    )
    hyperparameters: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Per-model overrides of default kwargs"
    )


class EvaluationConfig(BaseModel):
    """Evaluation and ranking configuration."""

    model_config = ConfigDict(frozen=True)

    threshold: float = Field(default=0.5, gt=0.0, lt=1.0)
    confidence_level: float = Field(default=0.95, gt=0.0, lt=1.0)
    ranking_metric: RankingMetric = Field(default=RankingMetric.AUTO)
    imbalance_threshold: float = Field(
        default=0.35,
        gt=0.0,
        le=0.5,
        description="Minority fraction below which PR area ranks models",
    )


class MLflowConfig(BaseModel):
    """MLflow experiment tracking configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False)
    tracking_uri: str = Field(default="http://127.0.0.1:5000")
    experiment_name: str | None = Field(
        default=None, description="MLflow experiment name (defaults to project name)"
    )


class OutputConfig(BaseModel):
    """Output paths configuration.

    Structure: ./output/{project}/plots
    """

    model_config = ConfigDict(frozen=True)

    output_root: Path = Field(
        default=Path("./output"), description="Root directory for all outputs"
    )


class PipelineConfig(BaseModel):
    """Complete workflow configuration.

    The project name drives:
    - MLflow experiment name (if not explicitly set)
    - Output directory structure: ./output/{project}/
    """

    model_config = ConfigDict(frozen=True)

    project: str = Field(description="Project identifier (e.g., 'biopsy')")

    dataset: DatasetConfig
    split: SplitConfig = Field(default_factory=SplitConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    models: ModelConfig = Field(default_factory=ModelConfig)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    mlflow: MLflowConfig = Field(default_factory=MLflowConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def experiment_name(self) -> str:
        """MLflow experiment name (derived from project if not set)."""
        return self.mlflow.experiment_name or self.project

    @property
    def plots_dir(self) -> Path:
        """Path to plots output directory."""
        return self.output.output_root / self.project / "plots"
