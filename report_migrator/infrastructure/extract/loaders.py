"""Readers for the raw report and asset extracts."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from report_migrator.domain.errors import ExtractError
from report_migrator.domain.models import RawAsset, RawReport


def _records_from_json(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ExtractError(f"{path} must contain a JSON array of records")
    if not all(isinstance(item, dict) for item in data):
        raise ExtractError(f"{path} contains non-object records")
    return data


def _records_from_frame(frame: pd.DataFrame) -> list[dict[str, Any]]:
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame.to_dict(orient="records")


def read_extract(path: Path | str) -> list[dict[str, Any]]:
    """Load an extract as a list of row mappings with text values.

    JSON is read as-is; CSV and Excel go through pandas with every column kept
    as a string and blanks kept as empty strings.
    """
    path = Path(path)
    if not path.is_file():
        raise ExtractError(f"Extract not found: {path}")
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return _records_from_json(path)
        if suffix == ".csv":
            return _records_from_frame(pd.read_csv(path, dtype=str, keep_default_na=False))
        if suffix in {".xlsx", ".xlsm"}:
            return _records_from_frame(
                pd.read_excel(path, engine="openpyxl", dtype=str, keep_default_na=False)
            )
    except (ValueError, OSError, UnicodeDecodeError) as exc:
        raise ExtractError(f"Could not parse {path}: {exc}") from exc
    raise ExtractError(f"Unsupported extract format: {path.suffix or path.name}")


def load_reports(path: Path | str) -> Sequence[RawReport]:
    return [RawReport.from_mapping(row) for row in read_extract(path)]


def load_assets(path: Path | str) -> Sequence[RawAsset]:
    return [RawAsset.from_mapping(row) for row in read_extract(path)]
