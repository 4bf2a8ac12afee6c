"""
Tumorclass: Binary Classification Comparison Workflow.

This package provides loading, cleaning, partitioning, model training and
evaluation for comparing standard classifiers on labelled tabular data
such as the Wisconsin breast cancer biopsy records.
"""

from importlib.metadata import version

__version__ = version("tumorclass")

__all__ = ["__version__"]
