"""DuckDB + Parquet storage backend for harmonized cohorts."""

from __future__ import annotations

import re
from pathlib import Path

import duckdb
import pandas as pd

from omicslink.models import CohortBundle, OmicsTable, TableKind
from omicslink.storage.base import CohortStorage


_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def table_rows(table: OmicsTable) -> pd.DataFrame:
    """Flatten a table into rows with an explicit ``sample_id`` column.

    Matrices are stored long (``feature``, ``sample_id``, ``value``) so that
    expression and methylation share one shape regardless of width.
    """

    frame = table.frame
    if table.kind is TableKind.PROBE_ANNOTATION:
        return frame.reset_index(drop=True)

    if table.ids is None:
        raise ValueError(f"Table '{table.name}' has not been harmonized")

    if table.is_matrix:
        wide = frame.copy()
        wide.columns = pd.Index(list(table.ids), name="sample_id")
        wide.index = wide.index.rename("feature")
        return wide.reset_index().melt(id_vars="feature", var_name="sample_id", value_name="value")

    rows = frame.reset_index(drop=True).copy()
    rows.insert(0, "sample_id", list(table.ids))
    return rows


class DuckDBParquetStorage(CohortStorage):
    """Persist cohort tables in a queryable DB and portable Parquet files."""

    def __init__(
        self,
        *,
        db_path: str | Path,
        parquet_dir: str | Path,
        table_prefix: str = "cohort",
    ) -> None:
        if not _TABLE_RE.match(table_prefix):
            raise ValueError(f"Unsafe table prefix: {table_prefix}")

        self.db_path = Path(db_path)
        self.parquet_dir = Path(parquet_dir)
        self.table_prefix = table_prefix

    def table_name(self, table: OmicsTable) -> str:
        return f"{self.table_prefix}_{table.kind.value}"

    def persist(self, bundle: CohortBundle) -> None:
        tables = [bundle.clinical, *bundle.omic_tables()]
        if bundle.probe_annotation is not None:
            tables.append(bundle.probe_annotation)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.parquet_dir.mkdir(parents=True, exist_ok=True)

        connection = duckdb.connect(str(self.db_path))
        try:
            for table in tables:
                name = self.table_name(table)
                frame = table_rows(table)
                connection.register("cohort_frame", frame)
                connection.execute(f"CREATE OR REPLACE TABLE {name} AS SELECT * FROM cohort_frame")
                connection.unregister("cohort_frame")

                parquet_path = self.parquet_dir / f"{name}.parquet"
                if parquet_path.exists():
                    parquet_path.unlink()

                parquet_target = parquet_path.as_posix().replace("'", "''")
                connection.execute(f"COPY {name} TO '{parquet_target}' (FORMAT PARQUET)")
        finally:
            connection.close()
