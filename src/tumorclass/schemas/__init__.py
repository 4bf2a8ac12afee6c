"""
Schema definitions using Pandera for data validation.

Cleaned datasets are validated here before partitioning so that every
downstream stage can rely on complete, two-class records.
"""

from tumorclass.schemas.dataset import build_dataset_schema

__all__ = ["build_dataset_schema"]
