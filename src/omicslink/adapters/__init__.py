"""Input adapters for OmicsLink."""

from .base import TableAdapter
from .common import expand_input_paths, read_table, read_tables
from .tables import (
    ClinicalTableAdapter,
    ExpressionMatrixAdapter,
    MethylationMatrixAdapter,
    MutationTableAdapter,
    ProbeAnnotationAdapter,
)

__all__ = [
    "TableAdapter",
    "ClinicalTableAdapter",
    "MutationTableAdapter",
    "ExpressionMatrixAdapter",
    "MethylationMatrixAdapter",
    "ProbeAnnotationAdapter",
    "expand_input_paths",
    "read_table",
    "read_tables",
]
