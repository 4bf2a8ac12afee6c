"""
Configuration management with typed Pydantic models.

Provides explicit dataset layout and split parameterization and
environment-aware configuration loading.
"""

from tumorclass.config.loader import load_config
from tumorclass.config.settings import (
    BIOPSY_COLUMNS,
    DatasetConfig,
    EvaluationConfig,
    MLflowConfig,
    ModelConfig,
    PipelineConfig,
    RankingMetric,
    SplitConfig,
    TrainingConfig,
)

__all__ = [
    "BIOPSY_COLUMNS",
    "DatasetConfig",
    "EvaluationConfig",
    "MLflowConfig",
    "ModelConfig",
    "PipelineConfig",
    "RankingMetric",
    "SplitConfig",
    "TrainingConfig",
    "load_config",
]
