"""
Comparison workflow.

Orchestrates loading, partitioning, training, evaluation and ranking.
"""

from tumorclass.workflow.pipeline import ComparisonPipeline, ComparisonResult, run_comparison

__all__ = ["ComparisonPipeline", "ComparisonResult", "run_comparison"]
