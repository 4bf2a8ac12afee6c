"""
Base classes and utilities for data ingestion.

Provides common functionality for all dataset loaders.
"""

from abc import ABC, abstractmethod

import pandas as pd
import pandera.pandas as pa

from tumorclass.config.settings import DatasetConfig
from tumorclass.utils.logging import get_logger

log = get_logger(__name__)


class DataLoader(ABC):
    """
    Abstract base class for dataset loaders.

    Subclasses read raw records and clean them; the base class ensures
    consistent schema validation at the system boundary.
    """

    def __init__(self, config: DatasetConfig) -> None:
        """
        Initialize data loader.

        Args:
            config: Dataset configuration.
        """
        self.config = config
        self.n_raw: int | None = None

    @abstractmethod
    def _load_raw(self) -> pd.DataFrame:
        """Load raw data from source. Implemented by subclasses."""
        ...

    @abstractmethod
    def _clean(self, raw: pd.DataFrame) -> pd.DataFrame:
        """Turn raw records into a cleaned dataset. Implemented by subclasses."""
        ...

    @abstractmethod
    def schema(self, df: pd.DataFrame) -> pa.DataFrameSchema:
        """Schema the cleaned frame must satisfy."""
        ...

    def load(self, *, validate: bool = True) -> pd.DataFrame:
        """
        Load, clean and optionally validate data.

        Args:
            validate: Whether to validate against schema.

        Returns:
            Cleaned (and optionally validated) DataFrame.

        Raises:
            FileNotFoundError: If data file not found.
            LabelCodeError: If a label code is outside the expected set.
            MalformedRowError: If an attribute holds a non-numeric token.
            pandera.errors.SchemaError: If validation fails.
        """
        log.info("Loading data", loader=self.__class__.__name__)

        raw = self._load_raw()
        self.n_raw = len(raw)
        log.info("Loaded raw data", rows=len(raw), columns=list(raw.columns))

        df = self._clean(raw)

        if validate:
            df = self.schema(df).validate(df)
            log.info("Schema validation passed")

        return df
