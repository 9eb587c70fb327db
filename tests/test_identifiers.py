import sys
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from omicslink import (  # noqa: E402
    BarcodeNormalizer,
    HarmonizationSettings,
    MalformedIdentifierError,
    OmicsTable,
    TableKind,
    ValidationError,
    filter_sample_types,
    normalize_barcode,
    parse_barcode,
    sample_type_code,
)


def test_normalize_truncates_lowercases_and_swaps_delimiter() -> None:
    assert normalize_barcode("TCGA-3C-AAAU-01A-11R-A41B-07") == "tcga.3c.aaau"


def test_normalize_is_idempotent_on_canonical_ids() -> None:
    normalizer = BarcodeNormalizer()
    canonical = normalizer.normalize("TCGA-AB-1234-01A-11D-A10Y-09")

    assert normalizer.normalize(canonical) == canonical
    assert normalizer.normalize(normalizer.normalize(canonical)) == canonical


def test_normalize_collapses_case_variants_of_one_patient() -> None:
    normalizer = BarcodeNormalizer()

    first = normalizer.normalize("TCGA-AB-1234-01A-...")
    second = normalizer.normalize("tcga-ab-1234-01b-...")

    assert first == second == "tcga.ab.1234"


def test_normalize_rejects_short_barcodes() -> None:
    normalizer = BarcodeNormalizer()

    with pytest.raises(MalformedIdentifierError) as excinfo:
        normalizer.normalize("TCGA-AB")

    assert isinstance(excinfo.value, ValidationError)
    assert excinfo.value.prefix_length == 12


def test_normalize_rejects_non_text_values() -> None:
    with pytest.raises(MalformedIdentifierError):
        BarcodeNormalizer().normalize(float("nan"))


def test_normalize_all_reports_position_of_malformed_entry() -> None:
    normalizer = BarcodeNormalizer()

    with pytest.raises(MalformedIdentifierError) as excinfo:
        normalizer.normalize_all(["TCGA-AB-1234-01A", "TCGA-AB-9999-01A", "bad"])

    assert excinfo.value.position == 2
    assert "position 2" in str(excinfo.value)


def test_settings_control_prefix_and_delimiter() -> None:
    normalizer = BarcodeNormalizer(HarmonizationSettings(prefix_length=15, delimiter="_"))

    assert normalizer.normalize("TCGA-AB-1234-01A-11R") == "tcga_ab_1234_01"


def test_settings_reject_non_positive_prefix() -> None:
    with pytest.raises(ValueError):
        HarmonizationSettings(prefix_length=0)


def test_parse_barcode_names_segments() -> None:
    parts = parse_barcode("TCGA-3C-AAAU-01A-11R-A41B-07")

    assert parts["project"] == "TCGA"
    assert parts["participant"] == "AAAU"
    assert parts["sample_vial"] == "01A"
    assert parts["center"] == "07"
    assert sample_type_code("TCGA-3C-AAAU-11A-11R-A41B-07") == "11"
    assert sample_type_code("TCGA-3C-AAAU") is None


def test_harmonize_derives_ids_from_matrix_columns() -> None:
    frame = pd.DataFrame(
        [[1.0, 2.0]],
        index=["TP53"],
        columns=["TCGA-AB-0001-01A-11R", "TCGA-AB-0002-01A-11R"],
    )
    table = OmicsTable(name="expression", kind=TableKind.EXPRESSION, frame=frame)

    harmonized = BarcodeNormalizer().harmonize(table)

    assert harmonized.ids == ("tcga.ab.0001", "tcga.ab.0002")
    assert table.ids is None


def test_filter_sample_types_keeps_primary_tumour_columns() -> None:
    frame = pd.DataFrame(
        [[1.0, 2.0, 3.0]],
        index=["TP53"],
        columns=[
            "TCGA-AB-0001-01A-11R",
            "TCGA-AB-0001-11A-11R",
            "TCGA-AB-0002-01B-11R",
        ],
    )
    table = OmicsTable(name="expression", kind=TableKind.EXPRESSION, frame=frame)

    filtered, removed = filter_sample_types(table, ["01"])

    assert removed == 1
    assert list(filtered.frame.columns) == ["TCGA-AB-0001-01A-11R", "TCGA-AB-0002-01B-11R"]


def test_filter_sample_types_filters_mutation_rows() -> None:
    frame = pd.DataFrame(
        {
            "Tumor_Sample_Barcode": ["TCGA-AB-0001-01A", "TCGA-AB-0001-10A", "TCGA-AB-0002-01A"],
            "Hugo_Symbol": ["TP53", "TP53", "PIK3CA"],
        }
    )
    table = OmicsTable(
        name="mutation",
        kind=TableKind.MUTATION,
        frame=frame,
        sample_column="Tumor_Sample_Barcode",
    )

    filtered, removed = filter_sample_types(table, ["01"])

    assert removed == 1
    assert filtered.frame["Hugo_Symbol"].tolist() == ["TP53", "PIK3CA"]
