"""CLI I/O helpers for value files and atomic artifact writing."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import yaml  # type: ignore[import-untyped]

from core.render.models import ExportArtifact


def build_output_paths(out_dir: Path, artifacts: list[ExportArtifact]) -> list[Path]:
    """Build output file paths under out_dir, one per artifact filename."""

    return [out_dir / artifact.filename for artifact in artifacts]


def existing_output_files(paths: list[Path]) -> list[Path]:
    return [path for path in paths if path.exists()]


def write_artifacts_atomic(out_dir: Path, artifacts: list[ExportArtifact]) -> list[Path]:
    """Write artifacts via temp files, replacing targets only once all are staged.

    On failure every staged temp file is removed and no target is touched.
    """

    out_dir.mkdir(parents=True, exist_ok=True)
    targets = build_output_paths(out_dir, artifacts)
    staged: list[tuple[Path, Path]] = []

    try:
        for target, artifact in zip(targets, artifacts):
            fd, raw_tmp_path = tempfile.mkstemp(
                dir=target.parent,
                prefix=f"{target.name}.",
                suffix=".tmp",
            )
            tmp_path = Path(raw_tmp_path)
            staged.append((tmp_path, target))
            with os.fdopen(fd, "wb") as handle:
                handle.write(artifact.content)

        for tmp_path, target in staged:
            tmp_path.replace(target)
    except Exception:
        for tmp_path, _ in staged:
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
        raise

    return targets


def load_values_file(path: Path) -> dict[str, str]:
    """Load a field-value mapping from a JSON or YAML object file."""

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in values file: {path}") from exc
    else:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in values file: {path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Values file must contain an object: {path}")
    return {str(key): "" if value is None else str(value) for key, value in raw.items()}


def parse_assignments(items: list[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` command-line assignments."""

    values: dict[str, str] = {}
    for item in items:
        key, separator, value = item.partition("=")
        if not separator or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got: {item}")
        values[key.strip()] = value
    return values
