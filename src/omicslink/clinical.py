"""Clinical table preparation: keys, staging and survival columns."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from typing import Any

import pandas as pd

from omicslink.config import STAGING_FIELDS
from omicslink.errors import ValidationError
from omicslink.identifiers import BarcodeNormalizer
from omicslink.models import OmicsTable, TableKind
from omicslink.quality import is_missing


_STAGE_RE = re.compile(r"^([tnm])(is|x|\d)")

DEAD_MARKERS: frozenset[str] = frozenset({"1", "1.0", "dead", "deceased", "true"})
ALIVE_MARKERS: frozenset[str] = frozenset({"0", "0.0", "alive", "living", "false"})


def prepare_clinical_table(
    frame: pd.DataFrame,
    *,
    name: str = "clinical",
    id_column: str | None = None,
    normalizer: BarcodeNormalizer | None = None,
) -> OmicsTable:
    """Key a clinical frame by canonical id and lowercase its column labels.

    Keys are run through the barcode normalizer, so both short clinical keys
    and full patient barcodes end up in the same form. Two rows collapsing
    onto one key is an error: the clinical table must hold one row per
    patient.
    """

    normalizer = normalizer or BarcodeNormalizer()
    prepared = frame.copy()
    prepared.columns = [str(column).strip().lower() for column in prepared.columns]

    if id_column is not None:
        key = id_column.strip().lower()
        if key not in prepared.columns:
            raise KeyError(f"Clinical table '{name}' has no id column {id_column!r}")
        raw_ids = prepared.pop(key).tolist()
    else:
        raw_ids = prepared.index.tolist()

    ids = normalizer.normalize_all(raw_ids)
    duplicated = sorted(value for value, count in Counter(ids).items() if count > 1)
    if duplicated:
        raise ValidationError(
            f"Clinical table '{name}' has {len(duplicated)} duplicate patient keys: "
            f"{', '.join(duplicated[:5])}"
        )

    prepared.index = pd.Index(list(ids), name="sample_id")
    return OmicsTable(name=name, kind=TableKind.CLINICAL, frame=prepared, ids=ids)


def collapse_stage(value: Any) -> str | None:
    """Reduce a T/N/M stage to its main category.

    ``T2a`` becomes ``t2``, ``N1mi`` becomes ``n1``; ``TX``/``NX`` and blanks
    become ``None``. Values that are not TNM codes are returned lowercased.
    """

    if is_missing(value):
        return None

    cleaned = str(value).strip().lower()
    match = _STAGE_RE.match(cleaned)
    if match is None:
        return cleaned
    if match.group(2) == "x":
        return None
    return match.group(1) + match.group(2)


def collapse_staging(frame: pd.DataFrame, fields: Sequence[str] = STAGING_FIELDS) -> pd.DataFrame:
    """Return a copy of ``frame`` with every staging column collapsed."""

    collapsed = frame.copy()
    for field_name in fields:
        if field_name in collapsed.columns:
            collapsed[field_name] = collapsed[field_name].map(collapse_stage).astype(object)
    return collapsed


def _event_flag(value: Any) -> float:
    if is_missing(value):
        return float("nan")
    cleaned = str(value).strip().lower()
    if cleaned in DEAD_MARKERS:
        return 1.0
    if cleaned in ALIVE_MARKERS:
        return 0.0
    return float("nan")


def survival_frame(
    clinical: pd.DataFrame,
    *,
    status_column: str = "vital_status",
    death_column: str = "days_to_death",
    followup_column: str = "days_to_last_followup",
    dropna: bool = True,
) -> pd.DataFrame:
    """Derive ``time`` and ``event`` columns for survival models.

    ``time`` is days to death for patients who died and days to last
    follow-up otherwise. Day counts are taken as recorded; whether every
    patient's clock starts at the same event (diagnosis, surgery) is not
    checked.
    """

    for column in (status_column, death_column, followup_column):
        if column not in clinical.columns:
            raise KeyError(f"Clinical table has no column {column!r}")

    event = clinical[status_column].map(_event_flag)
    death = pd.to_numeric(clinical[death_column], errors="coerce")
    followup = pd.to_numeric(clinical[followup_column], errors="coerce")
    time = death.where(event == 1.0, followup)

    survival = pd.DataFrame({"time": time, "event": event}, index=clinical.index)
    if dropna:
        survival = survival.dropna()
        survival["event"] = survival["event"].astype(int)
    return survival
