"""Determinism check for generated graph artifacts."""

from __future__ import annotations

import filecmp
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.write import generate_all_artifacts

if TYPE_CHECKING:
    from rules.config import RepoGraphConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _relative_files(root: Path) -> set[str]:
    return {
        path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()
    }


def verify_determinism(
    *,
    root: Path,
    artifacts_dir: Path,
    config: RepoGraphConfig | None = None,
) -> DeterminismResult:
    """Regenerate artifacts and compare them with an existing directory.

    Artifacts are regenerated into a temporary directory and compared
    byte-for-byte, file sets by relative path.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        if config is None:
            generate_all_artifacts(root=root, out_dir=temp_path)
        else:
            generate_all_artifacts(root=root, out_dir=temp_path, config=config)

        original_files = _relative_files(artifacts_dir)
        regenerated_files = _relative_files(temp_path)

        missing = sorted(original_files - regenerated_files)
        extra = sorted(regenerated_files - original_files)
        mismatches = sorted(
            rel
            for rel in original_files & regenerated_files
            if not filecmp.cmp(artifacts_dir / rel, temp_path / rel, shallow=False)
        )

    ok = not missing and not extra and not mismatches
    if not ok:
        logger.info(
            "Artifacts drifted: %d missing, %d extra, %d mismatched",
            len(missing),
            len(extra),
            len(mismatches),
        )
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
