"""Shared utilities for delimited-file table adapters."""

from __future__ import annotations

import glob
import gzip
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd


TABULAR_SUFFIXES: tuple[str, ...] = (".csv", ".tsv", ".txt", ".maf")


def _is_tabular(path: Path) -> bool:
    """Return True if the file looks like a delimited text file, compressed or not."""

    name = path.name.lower()
    if name.endswith(".gz"):
        name = name[:-3]
    return name.endswith(TABULAR_SUFFIXES)


def expand_input_paths(input_paths: str | Path | Iterable[str | Path]) -> list[Path]:
    """Expand file, directory, or glob inputs into concrete table paths."""

    if isinstance(input_paths, (str, Path)):
        items: list[str | Path] = [input_paths]
    else:
        items = list(input_paths)

    resolved: list[Path] = []
    for item in items:
        expanded_item = os.path.expandvars(os.path.expanduser(str(item)))
        item_path = Path(expanded_item)

        if item_path.is_dir():
            resolved.extend(
                sorted(
                    path
                    for path in item_path.iterdir()
                    if path.is_file() and _is_tabular(path)
                )
            )
            continue

        if item_path.exists():
            resolved.append(item_path)
            continue

        matches = [Path(path) for path in glob.glob(expanded_item)]
        resolved.extend(sorted(match for match in matches if _is_tabular(match)))

    return resolved


def delimiter_for(path: Path) -> str:
    """Pick the field separator from the file suffix (comma only for ``.csv``)."""

    name = path.name.lower()
    if name.endswith(".gz"):
        name = name[:-3]
    return "," if name.endswith(".csv") else "\t"


def count_header_lines(path: Path, prefix: str) -> int:
    """Count the leading lines of ``path`` that start with ``prefix``."""

    opener = gzip.open if path.name.lower().endswith(".gz") else open
    count = 0
    with opener(path, "rt", encoding="utf-8") as stream:
        for line in stream:
            if not line.startswith(prefix):
                break
            count += 1
    return count


def read_table(path: str | Path, *, header_comment: str | None = None, **kwargs: Any) -> pd.DataFrame:
    """Read one delimited file with pandas, inferring the separator.

    ``header_comment`` skips the leading lines starting with that prefix (MAF
    ``#version`` headers) without touching the same character inside fields.
    """

    table_path = Path(path)
    if not table_path.exists():
        raise FileNotFoundError(f"Table not found: {table_path}")

    options: dict[str, Any] = {"sep": delimiter_for(table_path), "compression": "infer"}
    if header_comment:
        options["skiprows"] = count_header_lines(table_path, header_comment)
    options.update(kwargs)
    return pd.read_csv(table_path, **options)


def read_tables(input_paths: str | Path | Iterable[str | Path], **kwargs: Any) -> pd.DataFrame:
    """Read and row-concatenate every table matched by ``input_paths``."""

    paths = expand_input_paths(input_paths)
    if not paths:
        raise FileNotFoundError(f"No tables matched: {input_paths}")

    frames = [read_table(path, **kwargs) for path in paths]
    if len(frames) == 1:
        return frames[0]
    return pd.concat(frames, ignore_index=True)
