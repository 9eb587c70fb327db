"""Cohort profile loader: harmonization settings plus clinical contract."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from omicslink.config import (
    CohortContract,
    FieldPolicy,
    HarmonizationSettings,
    MissingFieldStrategy,
)


@dataclass(frozen=True)
class CohortProfile:
    """Serializable profile describing how one cohort is linked."""

    name: str
    cohort: str
    description: str
    settings: HarmonizationSettings
    required_fields: tuple[str, ...]
    field_policies: dict[str, FieldPolicy]

    def to_contract(self) -> CohortContract:
        """Convert profile into a runtime validation contract."""

        return CohortContract(cohort=self.cohort, field_policies=self.field_policies)


class CohortProfileLoader:
    """Load profile JSON from ``config/profiles`` or a custom path."""

    def __init__(self, profiles_dir: str | Path | None = None) -> None:
        if profiles_dir is None:
            profiles_dir = Path(__file__).resolve().parents[2] / "config" / "profiles"
        self.profiles_dir = Path(profiles_dir)

    def list_profiles(self) -> list[str]:
        """Return available profile names from the configured profile directory."""

        return sorted(path.stem for path in self.profiles_dir.glob("*.json"))

    def load(self, name_or_path: str | Path) -> CohortProfile:
        """Load a profile by name (for example, ``tcga_brca``) or explicit path."""

        path = self._resolve_path(name_or_path)
        payload = json.loads(path.read_text())
        return self._parse(payload)

    def _resolve_path(self, name_or_path: str | Path) -> Path:
        requested = Path(name_or_path)

        if requested.exists():
            return requested

        candidate = self.profiles_dir / f"{requested}.json"
        if candidate.exists():
            return candidate

        raise FileNotFoundError(
            f"Profile not found: {name_or_path}. Available: {', '.join(self.list_profiles())}"
        )

    def _parse(self, payload: dict[str, Any]) -> CohortProfile:
        raw_settings = payload.get("harmonization", {})
        settings = HarmonizationSettings(
            prefix_length=int(raw_settings.get("prefix_length", 12)),
            source_delimiter=str(raw_settings.get("source_delimiter", "-")),
            delimiter=str(raw_settings.get("delimiter", ".")),
            sample_types=tuple(str(code) for code in raw_settings.get("sample_types", ())),
        )

        field_policies: dict[str, FieldPolicy] = {}
        for field_name, raw_policy in payload.get("field_policies", {}).items():
            missing_strategy = MissingFieldStrategy(raw_policy.get("missing_strategy", "exclude"))
            field_policies[field_name] = FieldPolicy(
                required=bool(raw_policy.get("required", False)),
                missing_strategy=missing_strategy,
                unknown_value=raw_policy.get("unknown_value", "Unknown"),
            )

        required_fields = tuple(payload.get("required_fields", ()))
        for field_name in required_fields:
            if field_name not in field_policies:
                field_policies[field_name] = FieldPolicy(required=True)

        return CohortProfile(
            name=str(payload["name"]),
            cohort=str(payload.get("cohort", payload["name"])).upper(),
            description=str(payload.get("description", "")),
            settings=settings,
            required_fields=required_fields,
            field_policies=field_policies,
        )
