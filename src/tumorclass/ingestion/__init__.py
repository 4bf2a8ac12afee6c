"""
Data ingestion layer.

Reads raw delimited records and turns them into validated datasets.
"""

from tumorclass.ingestion.loader import (
    DatasetSummary,
    DelimitedDatasetLoader,
    clean_dataset,
    describe_dataset,
    load_dataset,
)

__all__ = [
    "DatasetSummary",
    "DelimitedDatasetLoader",
    "clean_dataset",
    "describe_dataset",
    "load_dataset",
]
