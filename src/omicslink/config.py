"""Configuration contracts for OmicsLink cohorts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class MissingFieldStrategy(str, Enum):
    """How OmicsLink should handle a missing clinical value."""

    EXCLUDE = "exclude"
    UNKNOWN = "unknown"
    ALLOW = "allow"


@dataclass(frozen=True)
class FieldPolicy:
    """Validation and missing-value policy for a clinical field."""

    required: bool = False
    missing_strategy: MissingFieldStrategy = MissingFieldStrategy.EXCLUDE
    unknown_value: str = "Unknown"


@dataclass(frozen=True)
class HarmonizationSettings:
    """How raw assay barcodes are reduced to canonical clinical keys.

    The defaults keep the 12-character participant prefix of a TCGA barcode
    (``TCGA-AB-1234``) and swap hyphens for dots, which is how the clinical
    exports key their rows. Whether that prefix is the right join key is a
    cohort-level assumption, so it lives here rather than in code.
    """

    prefix_length: int = 12
    source_delimiter: str = "-"
    delimiter: str = "."
    sample_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.prefix_length < 1:
            raise ValueError("prefix_length must be positive")
        if not self.source_delimiter:
            raise ValueError("source_delimiter cannot be empty")


@dataclass(frozen=True)
class CohortContract:
    """Field-level contract for the clinical table of a cohort."""

    cohort: str
    field_policies: Mapping[str, FieldPolicy] = field(default_factory=dict)

    def policy_for(self, field_name: str) -> FieldPolicy:
        """Return the policy for a field, defaulting to optional/exclude behavior."""

        return self.field_policies.get(field_name, FieldPolicy())

    def required_fields(self) -> tuple[str, ...]:
        return tuple(name for name, policy in self.field_policies.items() if policy.required)


STAGING_FIELDS: tuple[str, ...] = (
    "pathologic_t",
    "pathologic_n",
)

SURVIVAL_FIELDS: tuple[str, ...] = (
    "vital_status",
    "days_to_death",
    "days_to_last_followup",
)


def build_clinical_contract(
    *,
    cohort: str,
    required_fields: set[str] | None = None,
    staging_missing_strategy: MissingFieldStrategy = MissingFieldStrategy.EXCLUDE,
) -> CohortContract:
    """Construct a contract requiring staging and vital status by default.

    Day counts stay optional: ``days_to_death`` is empty for living patients
    and ``days_to_last_followup`` is often empty for deceased ones.
    """

    required = set(required_fields if required_fields is not None else (*STAGING_FIELDS, "vital_status"))
    policies: dict[str, FieldPolicy] = {}

    for field_name in STAGING_FIELDS:
        policies[field_name] = FieldPolicy(
            required=field_name in required,
            missing_strategy=staging_missing_strategy,
        )

    for field_name in SURVIVAL_FIELDS:
        policies[field_name] = FieldPolicy(
            required=field_name in required,
            missing_strategy=MissingFieldStrategy.EXCLUDE,
        )

    for field_name in sorted(required - set(policies)):
        policies[field_name] = FieldPolicy(required=True)

    return CohortContract(cohort=cohort, field_policies=policies)
