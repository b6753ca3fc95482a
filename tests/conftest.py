from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from kirobridge.data.paths import WorkspacePaths

FIXED_NOW = datetime(2026, 10, 19, 8, 15, 30, 123000, tzinfo=timezone.utc)


@pytest.fixture
def paths(tmp_path: Path) -> WorkspacePaths:
    return WorkspacePaths.for_root(tmp_path)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def write_spec():
    """Factory that creates <specs>/<name>/ holding the given documents."""

    def _write_spec(paths: WorkspacePaths, name: str, docs: dict[str, str] | None = None) -> Path:
        spec_dir = paths.specs_dir / name
        spec_dir.mkdir(parents=True, exist_ok=True)
        for file_name, content in (docs or {}).items():
            (spec_dir / file_name).write_text(content, encoding="utf-8")
        return spec_dir

    return _write_spec
