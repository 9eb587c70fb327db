import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from omicslink import CohortProfileLoader, MissingFieldStrategy  # noqa: E402


def test_profile_loader_lists_default_profiles() -> None:
    names = CohortProfileLoader().list_profiles()

    assert "default" in names
    assert "tcga_brca" in names


def test_tcga_brca_profile_restricts_to_primary_tumours() -> None:
    profile = CohortProfileLoader().load("tcga_brca")

    assert profile.cohort == "BRCA"
    assert profile.settings.prefix_length == 12
    assert profile.settings.delimiter == "."
    assert profile.settings.sample_types == ("01",)

    contract = profile.to_contract()
    assert contract.policy_for("pathologic_t").required is True
    assert contract.policy_for("days_to_death").missing_strategy == MissingFieldStrategy.ALLOW


def test_profile_loader_accepts_explicit_path(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text(
        '{"name": "custom", "harmonization": {"prefix_length": 15, "delimiter": "-"},'
        ' "required_fields": ["er_status"]}'
    )

    profile = CohortProfileLoader(profiles_dir=tmp_path).load(path)

    assert profile.cohort == "CUSTOM"
    assert profile.settings.prefix_length == 15
    assert profile.to_contract().policy_for("er_status").required is True


def test_profile_loader_reports_available_profiles_when_missing() -> None:
    with pytest.raises(FileNotFoundError) as excinfo:
        CohortProfileLoader().load("no_such_cohort")

    assert "tcga_brca" in str(excinfo.value)
