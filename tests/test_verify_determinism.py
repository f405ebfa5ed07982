from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from artifacts.write import generate_all_artifacts
from verify.verify import DeterminismResult, verify_determinism


def _copy_mini_repo_fixture(root: Path) -> None:
    shutil.copytree(Path(__file__).parent / "fixtures" / "mini_repo", root)


def test_verify_determinism_requires_artifacts_dir(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Artifacts directory does not exist"):
        verify_determinism(root=repo_root, artifacts_dir=missing_dir)


def test_verify_determinism_rejects_file_as_artifacts_dir(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "artifacts"
    not_a_dir.write_text("", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        verify_determinism(root=tmp_path, artifacts_dir=not_a_dir)


def test_verify_determinism_regenerated_artifacts_match(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=repo_root, out_dir=artifacts_dir)

    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(ok=True)


def test_verify_determinism_detects_source_changes(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=repo_root, out_dir=artifacts_dir)

    (repo_root / "src" / "lib" / "git.ts").write_text(
        "export const a = 1;\n" * 40, encoding="utf-8"
    )
    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result.ok is False
    assert "graph.json" in result.mismatches


def test_verify_determinism_relative_paths_and_sorted_mismatches(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    for rel_path, content in (
        ("b.txt", "b-original"),
        ("a.txt", "a-original"),
        ("gone.txt", "gone"),
    ):
        (artifacts_dir / rel_path).write_text(content, encoding="utf-8")

    def _fake_generate_all_artifacts(*, root: Path, out_dir: Path) -> dict[str, object]:
        (out_dir / "a.txt").write_text("a-original", encoding="utf-8")
        (out_dir / "b.txt").write_text("b-regenerated", encoding="utf-8")
        (out_dir / "new.txt").write_text("new", encoding="utf-8")
        return {"artifacts": []}

    monkeypatch.setattr(
        "verify.verify.generate_all_artifacts",
        _fake_generate_all_artifacts,
    )

    result = verify_determinism(root=tmp_path, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(
        ok=False,
        mismatches=("b.txt",),
        missing=("gone.txt",),
        extra=("new.txt",),
    )


def test_verify_determinism_ignores_configured_output_dir(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    config_path = repo_root / "repograph.toml"
    config_path.write_text(
        'output_dir = "out"\n' + config_path.read_text(encoding="utf-8"),
        encoding="utf-8",
    )
    generate_all_artifacts(root=repo_root)

    result = verify_determinism(root=repo_root, artifacts_dir=repo_root / "out")

    assert result == DeterminismResult(ok=True)
