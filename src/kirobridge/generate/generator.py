# src/kirobridge/generate/generator.py
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from ..data.constants import (
    API_SPECIFICATION_FILE_NAME,
    DATABASE_SCHEMA_FILE_NAME,
    IMPLEMENTATION_TASKS_FILE_NAME,
)
from ..data.paths import WorkspacePaths
from ..data.spec_store import FileSpecStore
from ..data.spec_types import GeneratedFlags, SyncProgress
from ..errors import BridgeError
from ..utils.timestamps import Clock, iso_timestamp, utc_now
from .extractors import extract_routes, extract_tasks, extract_type_decls
from .renderers import render_route_stub, render_task_list, render_types_file, route_file_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one sync() call.

    Outputs of a failed generation step are None/empty and the failure is
    listed in `warnings`.
    """

    spec_dir: Path
    latest_link: Path
    progress_file: Path
    types_file: Path | None = None
    api_stubs: tuple[Path, ...] = ()
    task_list: Path | None = None
    task_count: int = 0
    warnings: tuple[str, ...] = ()


class ArtifactGenerator:
    """Generates stub artifacts from the newest spec directory.

    Every generated file is fully overwritten on each run. The only
    run-dependent content is the generation timestamp, taken from `clock`.
    """

    def __init__(
        self,
        paths: WorkspacePaths,
        *,
        store: FileSpecStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.paths = paths
        self.store = store or FileSpecStore(paths)
        self.clock = clock

    @staticmethod
    def _read_doc(spec_dir: Path, name: str) -> str:
        return (spec_dir / name).read_text(encoding="utf-8", errors="replace")

    # --------------------
    # Generation steps
    # --------------------
    def generate_types(self, spec_dir: Path) -> Path:
        schema = self._read_doc(spec_dir, DATABASE_SCHEMA_FILE_NAME)
        decls = extract_type_decls(schema)

        out = self.paths.generated_types_file
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(render_types_file(decls, generated_at=iso_timestamp(self.clock())), encoding="utf-8")
        logger.info("Wrote %d type declarations to %s", len(decls), out)
        return out

    def generate_api_stubs(self, spec_dir: Path) -> list[Path]:
        api = self._read_doc(spec_dir, API_SPECIFICATION_FILE_NAME)
        routes = extract_routes(api)

        self.paths.api_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for route in routes:
            p = self.paths.api_dir / route_file_name(route)
            p.write_text(render_route_stub(route), encoding="utf-8")
            written.append(p)
        logger.info("Wrote %d API stubs to %s", len(written), self.paths.api_dir)
        return written

    def generate_task_list(self, spec_dir: Path) -> tuple[Path, int]:
        text = self._read_doc(spec_dir, IMPLEMENTATION_TASKS_FILE_NAME)
        tasks = extract_tasks(text)

        out = self.paths.tasks_md
        out.write_text(render_task_list(tasks, generated_at=iso_timestamp(self.clock())), encoding="utf-8")
        logger.info("Wrote %d tasks to %s", len(tasks), out)
        return out, len(tasks)

    def get_latest_spec(self) -> Path:
        return self.store.latest_spec_dir()

    # --------------------
    # Orchestration
    # --------------------
    def _attempt(self, label: str, fn: Callable[[Path], T], spec_dir: Path, warnings: list[str]) -> T | None:
        try:
            return fn(spec_dir)
        except (OSError, BridgeError) as e:
            msg = f"Skipped {label}: {e}"
            logger.warning(msg)
            warnings.append(msg)
            return None

    def sync(self) -> SyncResult:
        """Repoints `latest`, regenerates every artifact, then records progress.

        Resolving the latest spec and replacing the link are fatal on failure;
        individual generation steps are not.
        """
        spec_dir = self.get_latest_spec()
        logger.info("Syncing spec %s", spec_dir.name)
        link = self.store.update_latest_link(spec_dir)

        warnings: list[str] = []
        types_file = self._attempt("type generation", self.generate_types, spec_dir, warnings)
        stubs = self._attempt("API stub generation", self.generate_api_stubs, spec_dir, warnings)
        task_out = self._attempt("task list generation", self.generate_task_list, spec_dir, warnings)

        progress = SyncProgress(
            synced_at=iso_timestamp(self.clock()),
            spec_dir=str(spec_dir),
            generated=GeneratedFlags(types=True, api_stubs=True, task_list=True),
        )
        progress_file = self.store.write_sync_progress(progress)

        return SyncResult(
            spec_dir=spec_dir,
            latest_link=link,
            progress_file=progress_file,
            types_file=types_file,
            api_stubs=tuple(stubs or ()),
            task_list=task_out[0] if task_out else None,
            task_count=task_out[1] if task_out else 0,
            warnings=tuple(warnings),
        )
