"""Immutable in-memory table values shared across OmicsLink."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

import pandas as pd


class TableKind(str, Enum):
    """Role a table plays in a multi-omic cohort."""

    CLINICAL = "clinical"
    MUTATION = "mutation"
    EXPRESSION = "expression"
    METHYLATION = "methylation"
    PROBE_ANNOTATION = "probe_annotation"


MATRIX_KINDS: frozenset[TableKind] = frozenset({TableKind.EXPRESSION, TableKind.METHYLATION})


@dataclass(frozen=True, eq=False)
class OmicsTable:
    """One source table plus the canonical ids derived for its samples.

    Sample labels live in different places depending on ``kind``: matrix
    columns for expression/methylation, a barcode column for mutation calls
    and the row index for clinical tables. ``ids`` is ``None`` until the
    table has been harmonized.
    """

    name: str
    kind: TableKind
    frame: pd.DataFrame
    sample_column: str | None = None
    ids: tuple[str, ...] | None = None

    @property
    def is_matrix(self) -> bool:
        return self.kind in MATRIX_KINDS

    @property
    def harmonized(self) -> bool:
        return self.ids is not None

    def raw_labels(self) -> list[str]:
        """Return the sample labels as found in the source table."""

        if self.is_matrix:
            return [str(label) for label in self.frame.columns]
        if self.kind is TableKind.MUTATION:
            if self.sample_column is None or self.sample_column not in self.frame.columns:
                raise KeyError(f"Mutation table '{self.name}' has no sample column {self.sample_column!r}")
            return self.frame[self.sample_column].astype(str).tolist()
        return [str(label) for label in self.frame.index]

    def with_frame(self, frame: pd.DataFrame, ids: tuple[str, ...] | None = None) -> "OmicsTable":
        """Return a copy of this table with a new frame and id tuple."""

        return replace(self, frame=frame, ids=ids)

    def unique_ids(self) -> list[str]:
        """Canonical ids in first-seen order (mutation tables repeat them)."""

        if self.ids is None:
            return []
        return list(dict.fromkeys(self.ids))


@dataclass(frozen=True, eq=False)
class CohortBundle:
    """Every table of one cohort, passed between pipeline steps by value."""

    cohort: str
    clinical: OmicsTable
    mutation: OmicsTable | None = None
    expression: OmicsTable | None = None
    methylation: OmicsTable | None = None
    probe_annotation: OmicsTable | None = None

    @classmethod
    def from_tables(cls, cohort: str, tables: list[OmicsTable]) -> "CohortBundle":
        """Assemble a bundle, requiring exactly one table per kind."""

        by_kind: dict[TableKind, OmicsTable] = {}
        for table in tables:
            if table.kind in by_kind:
                raise ValueError(
                    f"Duplicate {table.kind.value} table: '{by_kind[table.kind].name}' and '{table.name}'"
                )
            by_kind[table.kind] = table

        if TableKind.CLINICAL not in by_kind:
            raise ValueError(f"Cohort '{cohort}' has no clinical table")

        return cls(
            cohort=cohort,
            clinical=by_kind[TableKind.CLINICAL],
            mutation=by_kind.get(TableKind.MUTATION),
            expression=by_kind.get(TableKind.EXPRESSION),
            methylation=by_kind.get(TableKind.METHYLATION),
            probe_annotation=by_kind.get(TableKind.PROBE_ANNOTATION),
        )

    def omic_tables(self) -> list[OmicsTable]:
        """Return the sample-bearing tables other than clinical."""

        return [
            table
            for table in (self.mutation, self.expression, self.methylation)
            if table is not None
        ]

    def replace_table(self, table: OmicsTable) -> "CohortBundle":
        """Return a new bundle with the table of the same kind swapped in."""

        return replace(self, **{table.kind.value: table})
