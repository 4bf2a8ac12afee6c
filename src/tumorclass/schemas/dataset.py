"""
Pandera schemas for cleaned classification datasets.

A cleaned dataset holds numeric attributes without missing values plus
one label column restricted to exactly two class names. The attribute
list is configuration-driven, so the schema is built per layout.
"""

import pandera.pandas as pa


def build_dataset_schema(
    attributes: list[str],
    label_column: str,
    classes: list[str],
) -> pa.DataFrameSchema:
    """
    Build a schema for a cleaned dataset layout.

    Args:
        attributes: Numeric predictor column names.
        label_column: Name of the label column.
        classes: The two permitted class names.

    Returns:
        DataFrameSchema rejecting missing attributes, unknown labels
        and unexpected columns.
    """
    columns = {
        name: pa.Column(
            float,
            nullable=False,
            coerce=True,
            description=f"Numeric predictor {name}",
        )
        for name in attributes
    }
    columns[label_column] = pa.Column(
        str,
        checks=pa.Check.isin(classes),
        nullable=False,
        coerce=True,
        description="Class label",
    )
    return pa.DataFrameSchema(
        columns,
        name="CleanDatasetSchema",
        strict=True,
        ordered=False,
    )
