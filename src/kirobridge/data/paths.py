# src/kirobridge/data/paths.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .constants import (
    API_DIR_NAME,
    CONVENTIONS_OVERRIDE_FILE_NAME,
    GENERATED_TYPES_FILE_NAME,
    HOOKS_DIR_NAME,
    KIRO_DIR_NAME,
    LATEST_LINK_NAME,
    SOURCE_DIR_NAME,
    SPECS_DIR_NAME,
    SYNC_PROGRESS_FILE_NAME,
    TASKS_FILE_NAME,
    TYPES_DIR_NAME,
    VALIDATION_REPORT_FILE_NAME,
)


@dataclass(frozen=True, slots=True)
class WorkspacePaths:
    """Defines the on-disk layout of one workspace (paths only).

    Layout:
      <root>/
        .kiro/specs/<timestamp>/000..006-*.md
        .kiro/specs/latest            -> newest spec directory
        .kiro/specs/sync-progress.json
        .kiro/hooks/*.sh
        .kiro/conventions.yaml        (optional overrides)
        src/types/generated.types.ts
        src/api/<route>.ts
        TASKS.md
        validation-report.json
    """

    root: Path

    @staticmethod
    def for_root(root: str | Path) -> "WorkspacePaths":
        return WorkspacePaths(root=Path(root).resolve())

    @property
    def kiro_dir(self) -> Path:
        return self.root / KIRO_DIR_NAME

    @property
    def specs_dir(self) -> Path:
        return self.kiro_dir / SPECS_DIR_NAME

    @property
    def hooks_dir(self) -> Path:
        return self.kiro_dir / HOOKS_DIR_NAME

    @property
    def latest_link(self) -> Path:
        return self.specs_dir / LATEST_LINK_NAME

    @property
    def sync_progress_json(self) -> Path:
        return self.specs_dir / SYNC_PROGRESS_FILE_NAME

    @property
    def conventions_override_yaml(self) -> Path:
        return self.kiro_dir / CONVENTIONS_OVERRIDE_FILE_NAME

    @property
    def src_dir(self) -> Path:
        return self.root / SOURCE_DIR_NAME

    @property
    def types_dir(self) -> Path:
        return self.src_dir / TYPES_DIR_NAME

    @property
    def generated_types_file(self) -> Path:
        return self.types_dir / GENERATED_TYPES_FILE_NAME

    @property
    def api_dir(self) -> Path:
        return self.src_dir / API_DIR_NAME

    @property
    def tasks_md(self) -> Path:
        return self.root / TASKS_FILE_NAME

    @property
    def validation_report_json(self) -> Path:
        return self.root / VALIDATION_REPORT_FILE_NAME
