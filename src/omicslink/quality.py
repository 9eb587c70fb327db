"""Contract validation for clinical covariates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from omicslink.config import CohortContract, MissingFieldStrategy


MISSING_MARKERS: frozenset[str] = frozenset(
    {
        "nan",
        "none",
        "null",
        "na",
        "[not available]",
        "[not applicable]",
        "[not evaluated]",
        "[unknown]",
        "[discrepancy]",
    }
)


def is_missing(value: Any) -> bool:
    """Return True for NaN, blanks and the archive's bracketed placeholders."""

    if value is None:
        return True
    if not isinstance(value, str) and pd.isna(value):
        return True
    cleaned = str(value).strip()
    return not cleaned or cleaned.lower() in MISSING_MARKERS


@dataclass(frozen=True)
class ValidationIssue:
    """Describes why a sample was modified or excluded."""

    record_key: str
    field_name: str
    message: str
    excluded: bool = False


@dataclass
class ValidationResult:
    """Validated clinical rows plus diagnostics."""

    frame: pd.DataFrame
    issues: list[ValidationIssue] = field(default_factory=list)
    dropped: int = 0

    @property
    def excluded_ids(self) -> list[str]:
        return list(dict.fromkeys(issue.record_key for issue in self.issues if issue.excluded))


class ContractValidator:
    """Apply a cohort contract to a clinical frame indexed by canonical id.

    A row missing a required field is either excluded, filled with an explicit
    unknown marker, or kept as-is, depending on the field policy. Values are
    never imputed from other rows. A field absent from the frame counts as
    missing for every row.
    """

    def validate(self, frame: pd.DataFrame, contract: CohortContract) -> ValidationResult:
        cleaned = frame.copy()
        issues: list[ValidationIssue] = []
        keep: list[bool] = []

        for position, (record_key, row) in enumerate(cleaned.iterrows()):
            keep_record = True
            for field_name, policy in contract.field_policies.items():
                if not is_missing(row.get(field_name)):
                    continue

                if not policy.required:
                    if policy.missing_strategy is MissingFieldStrategy.UNKNOWN:
                        self._set_value(cleaned, position, field_name, policy.unknown_value)
                    continue

                if policy.missing_strategy is MissingFieldStrategy.UNKNOWN:
                    self._set_value(cleaned, position, field_name, policy.unknown_value)
                    issues.append(
                        ValidationIssue(
                            record_key=str(record_key),
                            field_name=field_name,
                            message="Required field missing; set to unknown marker.",
                        )
                    )
                    continue

                if policy.missing_strategy is MissingFieldStrategy.ALLOW:
                    issues.append(
                        ValidationIssue(
                            record_key=str(record_key),
                            field_name=field_name,
                            message="Required field missing; kept by policy.",
                        )
                    )
                    continue

                keep_record = False
                issues.append(
                    ValidationIssue(
                        record_key=str(record_key),
                        field_name=field_name,
                        message="Required field missing; record excluded.",
                        excluded=True,
                    )
                )
                break

            keep.append(keep_record)

        return ValidationResult(
            frame=cleaned.loc[keep],
            issues=issues,
            dropped=keep.count(False),
        )

    @staticmethod
    def _set_value(frame: pd.DataFrame, position: int, field_name: str, value: Any) -> None:
        if field_name not in frame.columns:
            frame[field_name] = None
        if frame[field_name].dtype != object:
            frame[field_name] = frame[field_name].astype(object)
        frame.iloc[position, frame.columns.get_loc(field_name)] = value
