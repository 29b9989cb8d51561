"""Filesystem repository for per-report asset artifacts."""
from __future__ import annotations

import json
import logging
import urllib.parse
from pathlib import Path
from typing import Mapping, Sequence

from report_migrator.domain.errors import ExtractError
from report_migrator.domain.models import Division, RawAsset

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


def _encode_report_id(report_id: str) -> str:
    # Reversible: distinct ids map to distinct files.
    return urllib.parse.quote(str(report_id), safe="")


def artifact_name(division: Division, report_id: str) -> str:
    return f"{division.label}-{_encode_report_id(report_id)}.json"


class FileSystemArtifactRepository:
    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def path_for(self, division: Division, report_id: str) -> Path:
        return self._root / artifact_name(division, report_id)

    def write(self, division: Division, report_id: str, assets: Sequence[RawAsset]) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        target = self.path_for(division, report_id)
        payload = [asset.to_mapping() for asset in assets]
        target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Wrote %d assets to %s", len(assets), target.name)

    def read(self, division: Division, report_id: str) -> Sequence[RawAsset]:
        source = self.path_for(division, report_id)
        if not source.exists():
            return []
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ExtractError(f"Could not read artifact {source}: {exc}") from exc
        if not isinstance(data, list):
            raise ExtractError(f"Artifact {source} must contain a JSON array")
        return [RawAsset.from_mapping(row) for row in data]

    def write_manifest(self, counts: Mapping[Division, Mapping[str, int]]) -> Path:
        self._root.mkdir(parents=True, exist_ok=True)
        manifest = {
            division.label: [
                {"report_id": report_id, "file": artifact_name(division, report_id), "assets": count}
                for report_id, count in per_report.items()
            ]
            for division, per_report in counts.items()
        }
        manifest_path = self._root / MANIFEST_NAME
        manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        return manifest_path
