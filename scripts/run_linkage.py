#!/usr/bin/env python3
"""Harmonize and link the tables of one cohort from a JSON run config."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from omicslink import (  # noqa: E402
    AdapterPluginSpec,
    CohortProfileLoader,
    LinkagePipeline,
    build_default_adapter_registry,
)
from omicslink.storage import DuckDBParquetStorage  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run OmicsLink cohort linkage from JSON config")
    parser.add_argument("--config", required=True, help="Path to linkage JSON config")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (logs go to stderr)",
    )
    return parser.parse_args()


def load_json(path: str | Path) -> dict[str, Any]:
    return json.loads(Path(path).read_text())


def build_adapters(config: dict[str, Any]) -> list[Any]:
    registry = build_default_adapter_registry()
    for plugin_raw in config.get("plugins", []):
        registry.register_plugin(
            AdapterPluginSpec(
                name=plugin_raw["name"],
                module=plugin_raw["module"],
                class_name=plugin_raw["class_name"],
            )
        )

    adapters = []
    for adapter_raw in config.get("adapters", []):
        adapter_params = dict(adapter_raw.get("params", {}))
        adapters.append(registry.create(adapter_raw["name"], **adapter_params))
    return adapters


def build_storage(config: dict[str, Any]) -> Any:
    storage_config = config.get("storage")
    if not storage_config:
        return None

    storage_type = str(storage_config.get("type", "")).strip().lower()
    params = dict(storage_config.get("params", {}))

    if storage_type == "duckdb_parquet":
        return DuckDBParquetStorage(**params)

    raise ValueError(f"Unknown storage type: {storage_type}")


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_json(args.config)

    profile_loader = CohortProfileLoader(profiles_dir=config.get("profiles_dir"))
    if "profile_path" in config:
        profile = profile_loader.load(config["profile_path"])
    else:
        profile = profile_loader.load(config.get("profile", "default"))

    adapters = build_adapters(config)
    if not adapters:
        raise ValueError("No adapters configured. Set adapters[].")

    report = LinkagePipeline(
        cohort=profile.cohort,
        contract=profile.to_contract(),
        settings=profile.settings,
        adapters=adapters,
        storage=build_storage(config),
    ).run()

    payload = {
        "profile": profile.name,
        "cohort": report.cohort,
        "clinical_patients": report.clinical_patients,
        "eligible_patients": report.eligible_patients,
        "excluded_patients": report.excluded_patients,
        "analysis_patients": len(report.analysis_ids),
        "tables": {
            table.name: {
                "kind": table.kind,
                "raw_samples": table.raw_samples,
                "filtered_samples": table.filtered_samples,
                "duplicates_dropped": table.duplicates_dropped,
                "samples": table.samples,
                "clinical_overlap": table.clinical_overlap,
                "overlap_fraction": round(table.overlap_fraction, 4),
            }
            for table in report.tables
        },
        "issues": len(report.issues),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
