"""Adapters for the four cohort tables and the methylation probe annotation."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from omicslink.adapters.base import TableAdapter
from omicslink.adapters.common import read_table, read_tables
from omicslink.models import OmicsTable, TableKind


class ClinicalTableAdapter(TableAdapter):
    """Read a clinical export with one row per patient."""

    name = "clinical_table"

    def __init__(
        self,
        *,
        input_path: str | Path,
        id_column: str | None = None,
        table_name: str = "clinical",
        rename: dict[str, str] | None = None,
    ) -> None:
        self.input_path = Path(input_path)
        self.id_column = id_column
        self.table_name = table_name
        self.rename = dict(rename or {})

    def read(self) -> OmicsTable:
        frame = read_table(self.input_path, dtype=str, keep_default_na=False)
        if self.rename:
            frame = frame.rename(columns=self.rename)

        id_column = self.id_column or frame.columns[0]
        if id_column not in frame.columns:
            raise KeyError(f"Clinical table {self.input_path} has no column {id_column!r}")

        frame = frame.set_index(id_column)
        return OmicsTable(name=self.table_name, kind=TableKind.CLINICAL, frame=frame)


class MutationTableAdapter(TableAdapter):
    """Read one or more mutation annotation files (one row per call)."""

    name = "mutation_table"

    def __init__(
        self,
        *,
        input_paths: str | Path | Iterable[str | Path],
        sample_column: str = "Tumor_Sample_Barcode",
        table_name: str = "mutation",
        columns: Iterable[str] | None = None,
    ) -> None:
        self.input_paths = input_paths
        self.sample_column = sample_column
        self.table_name = table_name
        self.columns = list(columns) if columns is not None else None

    def read(self) -> OmicsTable:
        frame = read_tables(self.input_paths, header_comment="#", dtype=str, low_memory=False)
        if self.sample_column not in frame.columns:
            raise KeyError(f"Mutation table has no sample column {self.sample_column!r}")

        if self.columns is not None:
            wanted = [self.sample_column] + [c for c in self.columns if c != self.sample_column]
            frame = frame[[column for column in wanted if column in frame.columns]]

        return OmicsTable(
            name=self.table_name,
            kind=TableKind.MUTATION,
            frame=frame.reset_index(drop=True),
            sample_column=self.sample_column,
        )


class _MatrixTableAdapter(TableAdapter):
    """Read a features x samples matrix whose first column names the feature."""

    kind: TableKind

    def __init__(
        self,
        *,
        input_path: str | Path,
        feature_column: str | None = None,
        table_name: str | None = None,
    ) -> None:
        self.input_path = Path(input_path)
        self.feature_column = feature_column
        self.table_name = table_name or self.kind.value

    def read(self) -> OmicsTable:
        frame = read_table(self.input_path)
        feature_column = self.feature_column or frame.columns[0]
        if feature_column not in frame.columns:
            raise KeyError(f"Matrix {self.input_path} has no feature column {feature_column!r}")

        frame = frame.set_index(feature_column)
        frame = frame.apply(pd.to_numeric, errors="coerce")
        return OmicsTable(name=self.table_name, kind=self.kind, frame=frame)


class ExpressionMatrixAdapter(_MatrixTableAdapter):
    """Normalized transcript abundance, genes x samples."""

    name = "expression_matrix"
    kind = TableKind.EXPRESSION


class MethylationMatrixAdapter(_MatrixTableAdapter):
    """Probe-level beta values, probes x samples."""

    name = "methylation_matrix"
    kind = TableKind.METHYLATION


class ProbeAnnotationAdapter(TableAdapter):
    """Read the probe-to-gene side table of a methylation platform."""

    name = "probe_annotation"

    def __init__(
        self,
        *,
        input_path: str | Path,
        probe_column: str = "probe",
        gene_column: str = "gene",
        table_name: str = "probe_annotation",
    ) -> None:
        self.input_path = Path(input_path)
        self.probe_column = probe_column
        self.gene_column = gene_column
        self.table_name = table_name

    def read(self) -> OmicsTable:
        frame = read_table(self.input_path, dtype=str)
        missing = [c for c in (self.probe_column, self.gene_column) if c not in frame.columns]
        if missing:
            raise KeyError(f"Probe annotation {self.input_path} lacks columns: {', '.join(missing)}")

        frame = frame[[self.probe_column, self.gene_column]].rename(
            columns={self.probe_column: "probe", self.gene_column: "gene"}
        )
        return OmicsTable(name=self.table_name, kind=TableKind.PROBE_ANNOTATION, frame=frame)
