"""Composable OmicsLink harmonization pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd

from omicslink.adapters.base import TableAdapter
from omicslink.clinical import prepare_clinical_table
from omicslink.config import CohortContract, HarmonizationSettings
from omicslink.identifiers import BarcodeNormalizer, filter_sample_types
from omicslink.linkage import align, deduplicate, mutation_burden
from omicslink.models import CohortBundle, OmicsTable, TableKind
from omicslink.quality import ContractValidator, ValidationIssue, ValidationResult
from omicslink.storage.base import CohortStorage

logger = logging.getLogger(__name__)


@dataclass
class TableReport:
    """Harmonization summary for one omic table."""

    name: str
    kind: str
    raw_samples: int
    filtered_samples: int
    duplicates_dropped: int
    samples: int
    clinical_overlap: int
    overlap_fraction: float


@dataclass
class LinkageRunReport:
    """Execution summary for a pipeline run."""

    cohort: str
    clinical_patients: int
    eligible_patients: int
    excluded_patients: list[str]
    analysis_ids: tuple[str, ...]
    tables: list[TableReport] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)
    mutation_burden: dict[str, int] = field(default_factory=dict)
    bundle: CohortBundle | None = None

    def table(self, name: str) -> TableReport:
        for report in self.tables:
            if report.name == name:
                return report
        raise KeyError(f"No table report named '{name}'")


class LinkagePipeline:
    """Read, validate, harmonize and align every table of a cohort in order."""

    def __init__(
        self,
        *,
        cohort: str,
        contract: CohortContract,
        adapters: list[TableAdapter],
        settings: HarmonizationSettings | None = None,
        validator: ContractValidator | None = None,
        storage: CohortStorage | None = None,
        clinical_id_column: str | None = None,
    ) -> None:
        self.cohort = cohort
        self.contract = contract
        self.adapters = adapters
        self.settings = settings or HarmonizationSettings()
        self.normalizer = BarcodeNormalizer(self.settings)
        self.validator = validator or ContractValidator()
        self.storage = storage
        self.clinical_id_column = clinical_id_column

    def run(self) -> LinkageRunReport:
        bundle = CohortBundle.from_tables(self.cohort, [adapter.read() for adapter in self.adapters])

        clinical, validation, clinical_count = self._prepare_clinical(bundle.clinical)
        eligible = list(clinical.ids or ())
        bundle = bundle.replace_table(clinical)

        reports: list[TableReport] = []
        burden: dict[str, int] = {}
        analysis = list(eligible)

        for table in bundle.omic_tables():
            harmonized, report = self._harmonize(table, clinical)
            bundle = bundle.replace_table(harmonized)
            reports.append(report)

            present = set(harmonized.unique_ids())
            analysis = [value for value in analysis if value in present]

            if harmonized.kind is TableKind.MUTATION:
                burden = mutation_burden(harmonized.frame, harmonized.ids or ())

        if self.storage is not None:
            self.storage.persist(bundle)

        logger.info(
            "Cohort %s: %d eligible patients, %d shared by every table",
            self.cohort,
            len(eligible),
            len(analysis),
        )

        return LinkageRunReport(
            cohort=self.cohort,
            clinical_patients=clinical_count,
            eligible_patients=len(eligible),
            excluded_patients=validation.excluded_ids,
            analysis_ids=tuple(analysis),
            tables=reports,
            issues=validation.issues,
            mutation_burden=burden,
            bundle=bundle,
        )

    def _prepare_clinical(self, table: OmicsTable) -> tuple[OmicsTable, ValidationResult, int]:
        prepared = prepare_clinical_table(
            table.frame,
            name=table.name,
            id_column=self.clinical_id_column,
            normalizer=self.normalizer,
        )
        validation = self.validator.validate(prepared.frame, self.contract)

        for patient in validation.excluded_ids:
            logger.info("Excluding patient %s: required clinical field missing", patient)
        if validation.dropped:
            logger.warning(
                "%d of %d patients excluded by the %s clinical contract",
                validation.dropped,
                len(prepared.frame),
                self.contract.cohort,
            )

        frame = validation.frame
        clinical = prepared.with_frame(frame, ids=tuple(str(value) for value in frame.index))
        return clinical, validation, len(prepared.frame)

    def _harmonize(self, table: OmicsTable, clinical: OmicsTable) -> tuple[OmicsTable, TableReport]:
        raw_samples = len(set(table.raw_labels()))
        table, filtered = filter_sample_types(
            table,
            self.settings.sample_types,
            source_delimiter=self.settings.source_delimiter,
        )
        if filtered:
            logger.info(
                "%s: %d samples outside sample types %s removed",
                table.name,
                filtered,
                ",".join(self.settings.sample_types),
            )

        table = self.normalizer.harmonize(table)
        dropped = 0
        if table.is_matrix:
            result = deduplicate(table.frame, table.ids or ())
            dropped = result.dropped
            table = table.with_frame(result.table, ids=result.ids)
            if dropped:
                logger.warning(
                    "%s: %d replicate samples share a canonical id; kept first occurrence",
                    table.name,
                    dropped,
                )

        unique_ids = table.unique_ids()
        overlap = align(
            clinical.frame,
            clinical.ids or (),
            pd.DataFrame(index=pd.Index(unique_ids)),
            unique_ids,
            axis_a="index",
            axis_b="index",
            names=(clinical.name, table.name),
        )
        if overlap.is_empty:
            logger.warning(
                "%s shares no patients with %s (%d vs %d ids); check the barcode truncation settings",
                table.name,
                clinical.name,
                overlap.count_b,
                overlap.count_a,
            )
        else:
            logger.info(
                "%s: %d of %d samples matched to clinical rows (%.1f%%)",
                table.name,
                overlap.overlap_count,
                overlap.count_b,
                100 * overlap.overlap_fraction_b,
            )

        report = TableReport(
            name=table.name,
            kind=table.kind.value,
            raw_samples=raw_samples,
            filtered_samples=filtered,
            duplicates_dropped=dropped,
            samples=len(unique_ids),
            clinical_overlap=overlap.overlap_count,
            overlap_fraction=overlap.overlap_fraction_b,
        )
        return table, report
