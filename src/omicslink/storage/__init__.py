"""Cohort storage backends for OmicsLink."""

from .base import CohortStorage
from .duckdb_parquet import DuckDBParquetStorage, table_rows

__all__ = ["CohortStorage", "DuckDBParquetStorage", "table_rows"]
