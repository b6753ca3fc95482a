# src/kirobridge/data/spec_store.py
from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from ..errors import MalformedMetadataError, SpecNotFoundError
from .constants import (
    EXCLUDED_SPEC_NAMES,
    IMPLEMENTATION_META_FILE_NAME,
    KIRO_CONFIG_FILE_NAME,
)
from .paths import WorkspacePaths
from .spec_types import ImplementationMetadata, KiroConfig, SyncProgress

logger = logging.getLogger(__name__)


def write_json(path: Path, payload: dict[str, object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def read_json(path: Path) -> dict[str, object] | None:
    """Reads a JSON object from disk.

    Returns None when the file does not exist. A file that exists but does not
    hold a JSON object raises MalformedMetadataError; other OSErrors propagate.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedMetadataError(
            f"Invalid JSON in {path.name}: {e.msg}",
            data={"path": str(path), "line": e.lineno, "column": e.colno},
        ) from e
    if not isinstance(raw, dict):
        raise MalformedMetadataError(
            f"{path.name} must contain a JSON object",
            data={"path": str(path), "type": type(raw).__name__},
        )
    return raw


def replace_symlink(link: Path, target: Path) -> None:
    """Points `link` at `target`, removing any previous link first.

    Only a missing link is tolerated during removal; any other failure
    (e.g. `link` is a real directory) propagates.
    """
    try:
        link.unlink()
    except FileNotFoundError:
        pass
    os.symlink(target, link, target_is_directory=True)


class FileSpecStore:
    """Reads and writes spec records under <root>/.kiro/specs/.

    Layout:
      <root>/.kiro/specs/
        <timestamp>/
          000-requirements.md ... 006-implementation-tasks.md
          kiro.config.json
          implementation.meta.json
        latest -> <timestamp>
        sync-progress.json
    """

    def __init__(self, paths: WorkspacePaths) -> None:
        self.paths = paths

    # --------------------
    # Spec directories
    # --------------------
    def list_spec_dirs(self) -> list[Path]:
        """Returns candidate spec directories, newest first.

        Timestamped names sort lexicographically in chronological order, so a
        descending string sort puts the most recent first.
        """
        root = self.paths.specs_dir
        if not root.is_dir():
            return []
        names = [
            p.name
            for p in root.iterdir()
            if p.name not in EXCLUDED_SPEC_NAMES and p.is_dir()
        ]
        names.sort(reverse=True)
        return [root / n for n in names]

    def latest_spec_dir(self) -> Path:
        candidates = self.list_spec_dirs()
        if not candidates:
            raise SpecNotFoundError(
                "No spec directories found",
                data={"specs_dir": str(self.paths.specs_dir)},
            )
        return candidates[0]

    def update_latest_link(self, spec_dir: Path) -> Path:
        link = self.paths.latest_link
        replace_symlink(link, spec_dir)
        logger.debug("Pointed %s at %s", link, spec_dir)
        return link

    # --------------------
    # kiro.config.json
    # --------------------
    def write_kiro_config(self, spec_dir: Path, config: KiroConfig) -> Path:
        p = spec_dir / KIRO_CONFIG_FILE_NAME
        write_json(p, config.to_dict())
        return p

    def read_kiro_config(self, spec_dir: Path) -> KiroConfig | None:
        raw = read_json(spec_dir / KIRO_CONFIG_FILE_NAME)
        return KiroConfig.from_dict(raw) if raw is not None else None

    # --------------------
    # implementation.meta.json
    # --------------------
    def write_metadata(self, spec_dir: Path, metadata: ImplementationMetadata) -> Path:
        p = spec_dir / IMPLEMENTATION_META_FILE_NAME
        write_json(p, metadata.to_dict())
        return p

    def read_metadata(self, spec_dir: Path) -> ImplementationMetadata | None:
        raw = read_json(spec_dir / IMPLEMENTATION_META_FILE_NAME)
        return ImplementationMetadata.from_dict(raw) if raw is not None else None

    # --------------------
    # sync-progress.json
    # --------------------
    def write_sync_progress(self, progress: SyncProgress) -> Path:
        p = self.paths.sync_progress_json
        write_json(p, progress.to_dict())
        return p

    def read_sync_progress(self) -> SyncProgress | None:
        raw = read_json(self.paths.sync_progress_json)
        return SyncProgress.from_dict(raw) if raw is not None else None
