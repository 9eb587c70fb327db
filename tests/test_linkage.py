import sys
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from omicslink import (  # noqa: E402
    BarcodeNormalizer,
    EmptyIntersectionError,
    ValidationError,
    align,
    attach_annotation,
    build_clinical_contract,
    burden_frame,
    deduplicate,
    mutated_samples,
    mutation_burden,
)


def _matrix(columns: list[str]) -> pd.DataFrame:
    return pd.DataFrame(
        [[float(i) for i in range(len(columns))], [float(i) * 10 for i in range(len(columns))]],
        index=["TP53", "GATA3"],
        columns=columns,
    )


def _clinical(rows: dict[str, dict[str, str]]) -> pd.DataFrame:
    frame = pd.DataFrame.from_dict(rows, orient="index")
    frame.index.name = "sample_id"
    return frame


def test_deduplicate_keeps_first_replicate_and_counts_collision() -> None:
    raw = ["TCGA-AB-1234-01A-...", "tcga-ab-1234-01b-..."]
    ids = BarcodeNormalizer().normalize_all(raw)

    result = deduplicate(_matrix(raw), ids)

    assert result.dropped == 1
    assert result.ids == ("tcga.ab.1234",)
    assert result.dropped_positions == (1,)
    assert result.table.shape == (2, 1)
    assert result.table.iloc[1, 0] == 0.0


def test_deduplicate_never_widens_and_yields_unique_ids() -> None:
    ids = ["p1", "p2", "p1", "p3", "p2", "p1"]
    table = _matrix([f"col{i}" for i in range(len(ids))])

    result = deduplicate(table, ids)

    assert result.table.shape[1] <= table.shape[1]
    assert len(set(result.ids)) == len(result.ids)
    assert result.ids == ("p1", "p2", "p3")
    assert list(result.table.columns) == ["p1", "p2", "p3"]
    assert result.dropped == 3


def test_deduplicate_does_not_modify_input() -> None:
    table = _matrix(["a", "b"])

    deduplicate(table, ["p1", "p1"])

    assert list(table.columns) == ["a", "b"]


def test_deduplicate_supports_row_axis() -> None:
    table = _clinical({"r1": {"x": "1"}, "r2": {"x": "2"}, "r3": {"x": "3"}})

    result = deduplicate(table, ["p1", "p2", "p1"], axis="index")

    assert result.ids == ("p1", "p2")
    assert result.table["x"].tolist() == ["1", "2"]


def test_deduplicate_rejects_length_mismatch() -> None:
    with pytest.raises(ValidationError):
        deduplicate(_matrix(["a", "b"]), ["p1"])


def test_align_returns_common_ids_in_first_table_order() -> None:
    clinical = _clinical(
        {
            "p1": {"pathologic_t": "t1"},
            "p2": {"pathologic_t": "t2"},
            "p3": {"pathologic_t": "t3"},
        }
    )
    mutation_ids = ["p4", "p3", "p2"]
    samples = _matrix(mutation_ids)

    result = align(clinical, list(clinical.index), samples, mutation_ids, axis_a="index")

    assert result.common_ids == ("p2", "p3")
    assert list(result.table_a.index) == ["p2", "p3"]
    assert list(result.table_b.columns) == ["p2", "p3"]
    assert result.table_b["p3"].tolist() == [1.0, 10.0]
    assert result.overlap_count == 2
    assert result.overlap_fraction_a == pytest.approx(2 / 3)
    assert not result.is_empty


def test_align_is_commutative_up_to_order() -> None:
    ids_a = ["p1", "p2", "p3", "p5"]
    ids_b = ["p5", "p4", "p2"]

    forward = align(_matrix(ids_a), ids_a, _matrix(ids_b), ids_b)
    backward = align(_matrix(ids_b), ids_b, _matrix(ids_a), ids_a)

    assert set(forward.common_ids) == set(backward.common_ids) == {"p2", "p5"}


def test_align_reports_empty_intersection() -> None:
    result = align(_matrix(["p1"]), ["p1"], _matrix(["p2", "p3"]), ["p2", "p3"])

    assert result.is_empty
    assert result.overlap_count == 0
    assert result.overlap_fraction_b == 0.0
    assert result.count_b == 2
    assert result.table_a.shape == (2, 0)


def test_align_can_require_overlap() -> None:
    with pytest.raises(EmptyIntersectionError) as excinfo:
        align(
            _matrix(["p1"]),
            ["p1"],
            _matrix(["p2"]),
            ["p2"],
            names=("clinical", "expression"),
            require_overlap=True,
        )

    assert excinfo.value.left == "clinical"
    assert excinfo.value.right_count == 1


def test_align_rejects_duplicate_ids() -> None:
    with pytest.raises(ValidationError):
        align(_matrix(["a", "b"]), ["p1", "p1"], _matrix(["p1"]), ["p1"])


def test_attach_annotation_excludes_sample_missing_staging() -> None:
    clinical = _clinical(
        {
            "p1": {"pathologic_t": "t1", "pathologic_n": "n0", "vital_status": "0"},
            "p2": {"pathologic_t": "", "pathologic_n": "n1", "vital_status": "1"},
            "p3": {"pathologic_t": "t2", "pathologic_n": "n0", "vital_status": "0"},
        }
    )
    ids = ["p1", "p2", "p3"]
    contract = build_clinical_contract(cohort="BRCA")

    result = attach_annotation(_matrix(ids), clinical, ids, contract=contract)

    assert len(result.annotations) == len(ids) - 1
    assert result.ids == ("p1", "p3")
    assert list(result.samples.columns) == ["p1", "p3"]
    assert result.excluded == 1
    assert result.issues[0].record_key == "p2"
    assert result.issues[0].field_name == "pathologic_t"


def test_attach_annotation_drops_samples_without_clinical_row() -> None:
    clinical = _clinical({"p1": {"pathologic_t": "t1"}})
    ids = ["p1", "p9"]

    result = attach_annotation(_matrix(ids), clinical, ids)

    assert result.ids == ("p1",)
    assert result.annotations["pathologic_t"].tolist() == ["t1"]
    assert result.excluded == 1
    assert result.issues[0].record_key == "p9"
    assert result.issues[0].excluded


def test_mutation_burden_counts_rows_per_sample() -> None:
    mutations = pd.DataFrame(
        {
            "Tumor_Sample_Barcode": [
                "TCGA-AB-0001-01A",
                "TCGA-AB-0001-01A",
                "TCGA-AB-0002-01A",
                "TCGA-AB-0001-01B",
            ],
            "Hugo_Symbol": ["TP53", "PIK3CA", "TP53", "GATA3"],
            "Variant_Classification": ["Missense_Mutation", "Silent", "Nonsense_Mutation", "Silent"],
        }
    )
    ids = BarcodeNormalizer().normalize_all(mutations["Tumor_Sample_Barcode"])

    burden = mutation_burden(mutations, ids)

    assert burden == {"tcga.ab.0001": 3, "tcga.ab.0002": 1}
    assert sum(burden.values()) == len(mutations)

    non_silent = mutation_burden(
        mutations,
        ids,
        variant_classes={"Missense_Mutation", "Nonsense_Mutation"},
    )
    assert non_silent == {"tcga.ab.0001": 1, "tcga.ab.0002": 1}

    assert mutated_samples(mutations, ids, "TP53") == {"tcga.ab.0001", "tcga.ab.0002"}
    assert mutated_samples(mutations, ids, "BRCA1") == set()


def test_burden_frame_reads_absent_samples_as_zero() -> None:
    series = burden_frame({"p1": 4}, ["p1", "p2"])

    assert series.to_dict() == {"p1": 4, "p2": 0}
    assert series.name == "mutation_burden"


def test_mutation_burden_rejects_length_mismatch() -> None:
    with pytest.raises(ValidationError):
        mutation_burden(pd.DataFrame({"x": [1, 2]}), ["p1"])


def test_mutation_burden_accepts_single_variant_class_name() -> None:
    mutations = pd.DataFrame(
        {
            "Tumor_Sample_Barcode": ["TCGA-AB-0001-01A", "TCGA-AB-0001-01A", "TCGA-AB-0002-01A"],
            "Variant_Classification": ["Silent", "Missense_Mutation", "Silent"],
        }
    )
    ids = BarcodeNormalizer().normalize_all(mutations["Tumor_Sample_Barcode"])

    burden = mutation_burden(mutations, ids, variant_classes="Silent")

    assert burden == {"tcga.ab.0001": 1, "tcga.ab.0002": 1}
