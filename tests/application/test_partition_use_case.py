import json
from pathlib import Path

from report_migrator.application.use_cases import PartitionAssetsUseCase
from report_migrator.domain.models import Division, RawAsset, RawReport
from report_migrator.infrastructure.artifacts.file_repository import FileSystemArtifactRepository


def test_partition_writes_one_artifact_per_division_and_report(tmp_path: Path) -> None:
    repo = FileSystemArtifactRepository(tmp_path / "output")
    reports = [RawReport(id="1", reference="R-001"), RawReport(id="2", reference="R-002")]
    assets = {
        Division.DIV_40: [
            RawAsset(report_id="1", name="Carpet"),
            RawAsset(report_id="99", name="Orphan"),
            RawAsset(report_id="1", name="Blinds"),
        ],
        Division.DIV_43: [RawAsset(report_id="2", name="Walls")],
    }

    result = PartitionAssetsUseCase(repo).execute(reports, assets)

    output = tmp_path / "output"
    assert sorted(p.name for p in output.iterdir()) == ["div-40-1.json", "div-43-2.json"]
    assert result.artifacts_written == 2
    assert result.report_ids(Division.DIV_40) == ("1",)

    written = json.loads((output / "div-40-1.json").read_text())
    assert [row["Name"] for row in written] == ["Carpet", "Blinds"]
    assert written[0]["ReportID"] == "1"

    assert [a.name for a in repo.read(Division.DIV_40, "1")] == ["Carpet", "Blinds"]
    assert repo.read(Division.DIV_43, "1") == []


def test_partition_overwrites_previous_artifacts(tmp_path: Path) -> None:
    repo = FileSystemArtifactRepository(tmp_path)
    reports = [RawReport(id="1", reference="R-001")]
    use_case = PartitionAssetsUseCase(repo)

    use_case.execute(reports, {Division.DIV_43: [RawAsset(report_id="1", name="Old")]})
    use_case.execute(reports, {Division.DIV_43: [RawAsset(report_id="1", name="New")]})

    assert [a.name for a in repo.read(Division.DIV_43, "1")] == ["New"]


def test_manifest_lists_artifacts(tmp_path: Path) -> None:
    repo = FileSystemArtifactRepository(tmp_path)
    result = PartitionAssetsUseCase(repo).execute(
        [RawReport(id="5", reference="R-005")],
        {Division.DIV_40: [RawAsset(report_id="5"), RawAsset(report_id="5")]},
    )

    manifest = json.loads(repo.write_manifest(result.counts).read_text())

    assert manifest == {"div-40": [{"report_id": "5", "file": "div-40-5.json", "assets": 2}]}


def test_similar_report_ids_get_separate_artifacts(tmp_path: Path) -> None:
    repo = FileSystemArtifactRepository(tmp_path)
    reports = [RawReport(id="A.1", reference="R-A.1"), RawReport(id="A1", reference="R-A1")]
    assets = {
        Division.DIV_40: [
            RawAsset(report_id="A.1", name="dotted"),
            RawAsset(report_id="A1", name="plain"),
        ]
    }

    PartitionAssetsUseCase(repo).execute(reports, assets)

    assert [a.name for a in repo.read(Division.DIV_40, "A.1")] == ["dotted"]
    assert [a.name for a in repo.read(Division.DIV_40, "A1")] == ["plain"]
    assert repo.path_for(Division.DIV_40, "A.1") != repo.path_for(Division.DIV_40, "A1")


def test_report_id_with_path_characters_stays_in_output_dir(tmp_path: Path) -> None:
    repo = FileSystemArtifactRepository(tmp_path)

    repo.write(Division.DIV_43, "../x/1", [RawAsset(report_id="../x/1", name="Walls")])

    assert repo.path_for(Division.DIV_43, "../x/1").parent == tmp_path
    assert [a.name for a in repo.read(Division.DIV_43, "../x/1")] == ["Walls"]
