"""Sample barcode normalization.

Assay platforms label samples with long barcodes such as
``TCGA-3C-AAAU-01A-11R-A41B-07`` while clinical exports key patients by a
short lowercase token such as ``tcga.3c.aaau``. :class:`BarcodeNormalizer`
derives the short form from the long one.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from omicslink.config import HarmonizationSettings
from omicslink.errors import MalformedIdentifierError
from omicslink.models import OmicsTable, TableKind


BARCODE_SEGMENTS: tuple[str, ...] = (
    "project",
    "tissue_source_site",
    "participant",
    "sample_vial",
    "portion_analyte",
    "plate",
    "center",
)


class BarcodeNormalizer:
    """Reduce raw barcodes to canonical ids using harmonization settings."""

    def __init__(self, settings: HarmonizationSettings | None = None) -> None:
        self.settings = settings or HarmonizationSettings()

    def normalize(self, raw_barcode: object, *, position: int | None = None) -> str:
        """Return the canonical id for one raw barcode.

        Canonical ids pass through unchanged, so the transform is idempotent.
        """

        if not isinstance(raw_barcode, str):
            raise MalformedIdentifierError(raw_barcode, self.settings.prefix_length, position)

        cleaned = raw_barcode.strip()
        if len(cleaned) < self.settings.prefix_length:
            raise MalformedIdentifierError(raw_barcode, self.settings.prefix_length, position)

        prefix = cleaned[: self.settings.prefix_length].lower()
        return prefix.replace(self.settings.source_delimiter, self.settings.delimiter)

    def normalize_all(self, raw_barcodes: Iterable[object]) -> tuple[str, ...]:
        """Normalize a sequence, failing on the first malformed entry."""

        return tuple(
            self.normalize(barcode, position=position)
            for position, barcode in enumerate(raw_barcodes)
        )

    def harmonize(self, table: OmicsTable) -> OmicsTable:
        """Attach canonical ids derived from the table's raw sample labels."""

        return table.with_frame(table.frame, ids=self.normalize_all(table.raw_labels()))


def normalize_barcode(
    raw_barcode: object,
    *,
    prefix_length: int = 12,
    delimiter: str = ".",
) -> str:
    """Module-level shortcut for :meth:`BarcodeNormalizer.normalize`."""

    settings = HarmonizationSettings(prefix_length=prefix_length, delimiter=delimiter)
    return BarcodeNormalizer(settings).normalize(raw_barcode)


def parse_barcode(raw_barcode: str, *, source_delimiter: str = "-") -> dict[str, str]:
    """Split a barcode into its named segments.

    Only the segments present are returned; a participant-level barcode
    yields three keys.
    """

    parts = [part for part in raw_barcode.strip().split(source_delimiter) if part]
    return dict(zip(BARCODE_SEGMENTS, parts))


def sample_type_code(raw_barcode: str, *, source_delimiter: str = "-") -> str | None:
    """Return the two-digit sample type (``01`` primary tumour, ``11`` normal)."""

    sample_vial = parse_barcode(raw_barcode, source_delimiter=source_delimiter).get("sample_vial")
    if not sample_vial or len(sample_vial) < 2 or not sample_vial[:2].isdigit():
        return None
    return sample_vial[:2]


def filter_sample_types(
    table: OmicsTable,
    codes: Sequence[str],
    *,
    source_delimiter: str = "-",
) -> tuple[OmicsTable, int]:
    """Keep only samples whose barcode carries one of ``codes``.

    Returns the filtered table and the number of samples removed (columns for
    matrices, rows for mutation calls). Clinical tables are returned as-is.
    """

    if not codes or table.kind in (TableKind.CLINICAL, TableKind.PROBE_ANNOTATION):
        return table, 0

    wanted = set(codes)
    labels = table.raw_labels()
    mask = [sample_type_code(label, source_delimiter=source_delimiter) in wanted for label in labels]
    removed = len(mask) - sum(mask)

    if table.is_matrix:
        frame = table.frame.loc[:, mask].copy()
    else:
        frame = table.frame.loc[mask].copy()

    ids = None
    if table.ids is not None:
        ids = tuple(value for value, keep in zip(table.ids, mask) if keep)

    return table.with_frame(frame, ids=ids), removed
