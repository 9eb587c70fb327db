"""Core OmicsLink harmonization primitives.

This package provides the building blocks for normalizing sample barcodes,
validating clinical covariates and linking clinical, mutation, expression and
methylation tables of one cancer cohort.
"""

from .clinical import collapse_stage, collapse_staging, prepare_clinical_table, survival_frame
from .config import (
    STAGING_FIELDS,
    SURVIVAL_FIELDS,
    CohortContract,
    FieldPolicy,
    HarmonizationSettings,
    MissingFieldStrategy,
    build_clinical_contract,
)
from .errors import (
    EmptyIntersectionError,
    HarmonizationError,
    MalformedIdentifierError,
    ValidationError,
)
from .identifiers import (
    BarcodeNormalizer,
    filter_sample_types,
    normalize_barcode,
    parse_barcode,
    sample_type_code,
)
from .linkage import (
    AlignmentResult,
    AnnotationResult,
    DeduplicationResult,
    align,
    attach_annotation,
    burden_frame,
    deduplicate,
    mutated_samples,
    mutation_burden,
)
from .methylation import collapse_probes, gene_probes
from .models import CohortBundle, OmicsTable, TableKind
from .pipeline import LinkagePipeline, LinkageRunReport, TableReport
from .profiles import CohortProfile, CohortProfileLoader
from .quality import ContractValidator, ValidationIssue, ValidationResult
from .registry import AdapterPluginSpec, AdapterRegistry, build_default_adapter_registry

__all__ = [
    "STAGING_FIELDS",
    "SURVIVAL_FIELDS",
    "AdapterPluginSpec",
    "AdapterRegistry",
    "AlignmentResult",
    "AnnotationResult",
    "BarcodeNormalizer",
    "CohortBundle",
    "CohortContract",
    "CohortProfile",
    "CohortProfileLoader",
    "ContractValidator",
    "DeduplicationResult",
    "EmptyIntersectionError",
    "FieldPolicy",
    "HarmonizationError",
    "HarmonizationSettings",
    "LinkagePipeline",
    "LinkageRunReport",
    "MalformedIdentifierError",
    "MissingFieldStrategy",
    "OmicsTable",
    "TableKind",
    "TableReport",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
    "align",
    "attach_annotation",
    "build_clinical_contract",
    "build_default_adapter_registry",
    "burden_frame",
    "collapse_probes",
    "collapse_stage",
    "collapse_staging",
    "deduplicate",
    "filter_sample_types",
    "gene_probes",
    "mutated_samples",
    "mutation_burden",
    "normalize_barcode",
    "parse_barcode",
    "prepare_clinical_table",
    "sample_type_code",
    "survival_frame",
]
