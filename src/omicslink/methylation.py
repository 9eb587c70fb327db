"""Probe-level methylation helpers."""

from __future__ import annotations

import pandas as pd

from omicslink.errors import ValidationError


AGGREGATIONS: tuple[str, ...] = ("mean", "median", "max", "min")


def _probe_gene_pairs(
    annotation: pd.DataFrame,
    probe_column: str,
    gene_column: str,
    separator: str,
) -> pd.DataFrame:
    for column in (probe_column, gene_column):
        if column not in annotation.columns:
            raise KeyError(f"Probe annotation has no column {column!r}")

    pairs = annotation[[probe_column, gene_column]].dropna().copy()
    pairs[gene_column] = pairs[gene_column].astype(str).str.split(separator)
    pairs = pairs.explode(gene_column)
    pairs[gene_column] = pairs[gene_column].str.strip()
    pairs = pairs[pairs[gene_column] != ""]
    return pairs.drop_duplicates()


def gene_probes(
    annotation: pd.DataFrame,
    gene: str,
    *,
    probe_column: str = "probe",
    gene_column: str = "gene",
    separator: str = ";",
) -> list[str]:
    """List the probes annotated to ``gene`` in annotation order."""

    pairs = _probe_gene_pairs(annotation, probe_column, gene_column, separator)
    return pairs.loc[pairs[gene_column] == gene, probe_column].astype(str).drop_duplicates().tolist()


def collapse_probes(
    table: pd.DataFrame,
    annotation: pd.DataFrame,
    *,
    how: str = "mean",
    probe_column: str = "probe",
    gene_column: str = "gene",
    separator: str = ";",
) -> pd.DataFrame:
    """Aggregate a probes x samples matrix into genes x samples.

    Probes annotated to several genes (``GENE1;GENE2``) count towards each of
    them. Probes without a gene annotation are dropped.
    """

    if how not in AGGREGATIONS:
        raise ValidationError(f"Unsupported aggregation {how!r}; expected one of {AGGREGATIONS}")
    if not table.index.is_unique:
        duplicated = table.index[table.index.duplicated()].unique().tolist()
        raise ValidationError(f"Methylation matrix repeats probes: {', '.join(map(str, duplicated[:5]))}")

    pairs = _probe_gene_pairs(annotation, probe_column, gene_column, separator)
    pairs = pairs[pairs[probe_column].isin(table.index)]

    values = table.loc[pairs[probe_column].tolist()].copy()
    values.index = pd.Index(pairs[gene_column].tolist(), name=gene_column)

    collapsed = values.groupby(level=0, sort=True).agg(how)
    return collapsed
