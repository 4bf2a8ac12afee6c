"""
Modeling layer for partitioning, training and prediction.

Provides stratified splitting, the classifier registry, standardising
pipelines and cross-validated model selection.
"""
