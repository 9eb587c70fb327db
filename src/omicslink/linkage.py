"""Record linkage across tables keyed by canonical sample ids.

Every function here is a pure transform: input frames are never modified and
each call returns new frames. Tables are addressed along one axis, either
``"columns"`` (expression and methylation matrices, samples as columns) or
``"index"`` (clinical tables, samples as rows).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import pandas as pd

from omicslink.config import CohortContract
from omicslink.errors import EmptyIntersectionError, ValidationError
from omicslink.quality import ContractValidator, ValidationIssue


AXES: tuple[str, ...] = ("columns", "index")

ABSENT_FROM_CLINICAL = "Sample absent from clinical table; record excluded."


@dataclass
class DeduplicationResult:
    """Table reduced to the first occurrence of every canonical id."""

    table: pd.DataFrame
    ids: tuple[str, ...]
    dropped: int = 0
    dropped_positions: tuple[int, ...] = ()


@dataclass
class AlignmentResult:
    """Two tables subset to their shared ids, co-indexed position by position."""

    table_a: pd.DataFrame
    table_b: pd.DataFrame
    common_ids: tuple[str, ...]
    count_a: int
    count_b: int

    @property
    def overlap_count(self) -> int:
        return len(self.common_ids)

    @property
    def overlap_fraction_a(self) -> float:
        return self.overlap_count / self.count_a if self.count_a else 0.0

    @property
    def overlap_fraction_b(self) -> float:
        return self.overlap_count / self.count_b if self.count_b else 0.0

    @property
    def is_empty(self) -> bool:
        return not self.common_ids


@dataclass
class AnnotationResult:
    """Clinical rows attached to the samples of an omic table."""

    annotations: pd.DataFrame
    samples: pd.DataFrame
    ids: tuple[str, ...]
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def excluded(self) -> int:
        return len({issue.record_key for issue in self.issues if issue.excluded})


def _check_axis(axis: str) -> None:
    if axis not in AXES:
        raise ValueError(f"axis must be one of {AXES}, got {axis!r}")


def _width(table: pd.DataFrame, axis: str) -> int:
    return table.shape[1] if axis == "columns" else table.shape[0]


def _take(table: pd.DataFrame, positions: Sequence[int], labels: Sequence[str], axis: str) -> pd.DataFrame:
    """Select positions along ``axis`` and relabel them with canonical ids."""

    if axis == "columns":
        subset = table.iloc[:, list(positions)].copy()
        subset.columns = pd.Index(list(labels), name="sample_id")
    else:
        subset = table.iloc[list(positions)].copy()
        subset.index = pd.Index(list(labels), name="sample_id")
    return subset


def _check_lengths(table: pd.DataFrame, ids: Sequence[str], axis: str, label: str) -> None:
    if len(ids) != _width(table, axis):
        raise ValidationError(
            f"{label}: {len(ids)} ids for {_width(table, axis)} {axis}; they must correspond 1:1"
        )


def _check_unique(ids: Sequence[str], label: str) -> None:
    if len(set(ids)) != len(ids):
        raise ValidationError(f"{label}: ids must be unique; deduplicate before aligning")


def deduplicate(
    table: pd.DataFrame,
    ids: Sequence[str],
    *,
    axis: str = "columns",
) -> DeduplicationResult:
    """Keep the first occurrence of each canonical id and drop the rest.

    Replicates collapsing onto one id are resolved by position: the lowest
    column (or row) index wins. Which replicate is kept is arbitrary, so the
    number dropped is returned for the caller to report.
    """

    _check_axis(axis)
    ids = list(ids)
    _check_lengths(table, ids, axis, "deduplicate")

    seen: set[str] = set()
    keep: list[int] = []
    dropped: list[int] = []
    for position, value in enumerate(ids):
        if value in seen:
            dropped.append(position)
            continue
        seen.add(value)
        keep.append(position)

    kept_ids = tuple(ids[position] for position in keep)
    return DeduplicationResult(
        table=_take(table, keep, kept_ids, axis),
        ids=kept_ids,
        dropped=len(dropped),
        dropped_positions=tuple(dropped),
    )


def align(
    table_a: pd.DataFrame,
    ids_a: Sequence[str],
    table_b: pd.DataFrame,
    ids_b: Sequence[str],
    *,
    axis_a: str = "columns",
    axis_b: str = "columns",
    names: tuple[str, str] = ("a", "b"),
    require_overlap: bool = False,
) -> AlignmentResult:
    """Subset two tables to their shared ids.

    Common ids follow the order of ``ids_a``. An empty intersection is a
    valid result (``is_empty``) unless ``require_overlap`` is set.
    """

    _check_axis(axis_a)
    _check_axis(axis_b)
    ids_a = list(ids_a)
    ids_b = list(ids_b)
    _check_lengths(table_a, ids_a, axis_a, names[0])
    _check_lengths(table_b, ids_b, axis_b, names[1])
    _check_unique(ids_a, names[0])
    _check_unique(ids_b, names[1])

    position_b = {value: position for position, value in enumerate(ids_b)}
    common = tuple(value for value in ids_a if value in position_b)

    if not common and require_overlap:
        raise EmptyIntersectionError(names[0], names[1], len(ids_a), len(ids_b))

    position_a = {value: position for position, value in enumerate(ids_a)}
    return AlignmentResult(
        table_a=_take(table_a, [position_a[value] for value in common], common, axis_a),
        table_b=_take(table_b, [position_b[value] for value in common], common, axis_b),
        common_ids=common,
        count_a=len(ids_a),
        count_b=len(ids_b),
    )


def attach_annotation(
    sample_table: pd.DataFrame,
    clinical_table: pd.DataFrame,
    ids: Sequence[str],
    *,
    contract: CohortContract | None = None,
    axis: str = "columns",
    validator: ContractValidator | None = None,
) -> AnnotationResult:
    """Look up the clinical row of every sample in ``sample_table``.

    ``clinical_table`` is indexed by canonical id. Samples without a clinical
    row, or whose row fails ``contract``, are excluded rather than padded
    with empty rows; each exclusion is reported as a :class:`ValidationIssue`.
    """

    _check_axis(axis)
    ids = list(ids)
    _check_lengths(sample_table, ids, axis, "sample table")
    _check_unique(ids, "sample table")

    issues: list[ValidationIssue] = []
    present = [value for value in ids if value in clinical_table.index]
    for value in ids:
        if value not in clinical_table.index:
            issues.append(
                ValidationIssue(
                    record_key=value,
                    field_name="",
                    message=ABSENT_FROM_CLINICAL,
                    excluded=True,
                )
            )

    candidates = clinical_table.loc[present]
    if contract is not None:
        validation = (validator or ContractValidator()).validate(candidates, contract)
        issues.extend(validation.issues)
        candidates = validation.frame

    usable = set(candidates.index)
    kept = tuple(value for value in ids if value in usable)
    positions = [position for position, value in enumerate(ids) if value in usable]

    annotations = candidates.loc[list(kept)].copy()
    annotations.index = pd.Index(list(kept), name="sample_id")

    return AnnotationResult(
        annotations=annotations,
        samples=_take(sample_table, positions, kept, axis),
        ids=kept,
        issues=issues,
    )


def mutation_burden(
    mutation_table: pd.DataFrame,
    ids: Sequence[str],
    *,
    variant_classes: Iterable[str] | None = None,
    class_column: str = "Variant_Classification",
) -> dict[str, int]:
    """Count mutation calls per canonical id.

    ``ids`` holds one id per mutation row. Samples with no calls do not
    appear in the mapping; use :func:`burden_frame` to merge with a cohort,
    which reads absent as zero. ``variant_classes`` restricts counting to the
    named classes (for example to leave out ``Silent`` calls).
    """

    ids = list(ids)
    if len(ids) != len(mutation_table):
        raise ValidationError(
            f"mutation burden: {len(ids)} ids for {len(mutation_table)} mutation rows"
        )

    labels = pd.Series(ids, index=mutation_table.index, dtype=object)
    if isinstance(variant_classes, str):
        variant_classes = (variant_classes,)
    if variant_classes is not None:
        if class_column not in mutation_table.columns:
            raise KeyError(f"Mutation table has no column {class_column!r}")
        labels = labels[mutation_table[class_column].isin(set(variant_classes)).to_numpy()]

    counts = labels.groupby(labels, sort=False).size()
    return {str(sample_id): int(count) for sample_id, count in counts.items()}


def burden_frame(burden: dict[str, int], ids: Sequence[str]) -> pd.Series:
    """Reindex a burden mapping onto ``ids``, reading absent samples as zero."""

    series = pd.Series(burden, dtype="int64").reindex(list(ids), fill_value=0)
    series.index.name = "sample_id"
    return series.rename("mutation_burden").astype("int64")


def mutated_samples(
    mutation_table: pd.DataFrame,
    ids: Sequence[str],
    gene: str,
    *,
    gene_column: str = "Hugo_Symbol",
) -> set[str]:
    """Return the canonical ids carrying at least one call in ``gene``."""

    ids = list(ids)
    if len(ids) != len(mutation_table):
        raise ValidationError(f"mutated samples: {len(ids)} ids for {len(mutation_table)} mutation rows")
    if gene_column not in mutation_table.columns:
        raise KeyError(f"Mutation table has no column {gene_column!r}")

    mask = (mutation_table[gene_column].astype(str) == gene).tolist()
    return {value for value, hit in zip(ids, mask) if hit}
