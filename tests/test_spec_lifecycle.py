import json
import stat
from itertools import combinations

import pytest

from kirobridge.data.constants import REQUIRED_SPEC_FILES
from kirobridge.data.spec_store import FileSpecStore
from kirobridge.data.spec_types import KiroConfig
from kirobridge.spec.hooks import setup_hooks
from kirobridge.spec.initializer import SpecInitializer
from kirobridge.spec.metadata import generate_implementation_metadata
from kirobridge.spec.validator import validate_spec


def test_init_creates_timestamped_project(paths, fixed_clock):
    project_dir = SpecInitializer(paths, clock=fixed_clock).init("Build a todo app")

    assert project_dir == paths.specs_dir / "2026-10-19T08-15-30-123Z"
    req = (project_dir / "000-requirements.md").read_text(encoding="utf-8")
    assert "Build a todo app" in req
    assert "2026-10-19T08:15:30.123Z" in req
    assert "- [ ] API specification" in req

    raw = json.loads((project_dir / "kiro.config.json").read_text(encoding="utf-8"))
    assert raw["projectName"] == "spec-2026-10-19T08-15-30-123Z"
    assert raw["requirements"] == "Build a todo app"
    assert raw["outputDir"] == str(project_dir)
    assert [h["name"] for h in raw["hooks"]] == ["spec-validation", "claude-notification"]
    assert raw["hooks"][0] == {"name": "spec-validation", "trigger": "spec-save", "action": "validate-consistency"}


def test_init_config_reads_back(paths, fixed_clock):
    store = FileSpecStore(paths)
    project_dir = SpecInitializer(paths, store=store, clock=fixed_clock).init("x")

    config = store.read_kiro_config(project_dir)

    assert isinstance(config, KiroConfig)
    assert config.hooks[1].action == "notify-implementation-ready"


def test_validate_spec_complete(paths, write_spec):
    spec_dir = write_spec(paths, "s1", {name: "content" for name in REQUIRED_SPEC_FILES})

    result = validate_spec(spec_dir)

    assert result.complete is True
    assert result.missing == ()
    assert list(result.files) == list(REQUIRED_SPEC_FILES)
    assert all(s.exists and s.size == len("content") for s in result.files.values())
    assert result.files[REQUIRED_SPEC_FILES[0]].modified.endswith("Z")


@pytest.mark.parametrize("absent_count", [1, 2, 6])
def test_validate_spec_missing_matches_absent_set(paths, absent_count, write_spec):
    for n, absent in enumerate(combinations(REQUIRED_SPEC_FILES, absent_count)):
        present = {name: "x" for name in REQUIRED_SPEC_FILES if name not in absent}
        spec_dir = write_spec(paths, f"case-{absent_count}-{n}", present)

        result = validate_spec(spec_dir)

        assert result.complete is False
        assert result.missing == absent
        assert len(result.files) == 6
        assert all(not result.files[name].exists for name in absent)


def test_validate_spec_missing_directory_reports_all(paths):
    result = validate_spec(paths.specs_dir / "does-not-exist")

    assert result.complete is False
    assert result.missing == REQUIRED_SPEC_FILES


def test_validate_spec_never_writes(paths, write_spec):
    spec_dir = write_spec(paths, "s1", {"001-project-overview.md": "x"})
    before = sorted(p.name for p in spec_dir.iterdir())

    validate_spec(spec_dir)

    assert sorted(p.name for p in spec_dir.iterdir()) == before


def test_metadata_extracts_tasks_and_dependencies(paths, fixed_clock, write_spec):
    spec_dir = write_spec(
        paths,
        "s1",
        {
            "006-implementation-tasks.md": "## Phase 1\n- [ ] Set up project\n- [ ] Add login\n",
            "003-technical-design.md": "Stack: next@14.0.0, zod@3.22.4 and next@14.0.0",
        },
    )
    store = FileSpecStore(paths)

    meta = generate_implementation_metadata(spec_dir, store=store, clock=fixed_clock)

    assert [t.description for t in meta.tasks] == ["Set up project", "Add login"]
    assert meta.dependencies == ("next@14.0.0", "zod@3.22.4")
    assert meta.estimated_time == 2

    raw = json.loads((spec_dir / "implementation.meta.json").read_text(encoding="utf-8"))
    assert raw["estimatedTime"] == 2
    assert raw["tasks"][0] == {"description": "Set up project", "completed": False, "estimatedHours": 1}
    assert store.read_metadata(spec_dir) == meta


def test_metadata_missing_documents_still_written(paths, fixed_clock, caplog, write_spec):
    spec_dir = write_spec(paths, "s1")

    with caplog.at_level("WARNING"):
        meta = generate_implementation_metadata(spec_dir, store=FileSpecStore(paths), clock=fixed_clock)

    assert meta.tasks == ()
    assert meta.dependencies == ()
    assert (spec_dir / "implementation.meta.json").exists()
    assert "could not read task list" in caplog.text


def test_metadata_tolerates_invalid_utf8_task_list(paths, fixed_clock, write_spec):
    spec_dir = write_spec(paths, "s1")
    (spec_dir / "006-implementation-tasks.md").write_bytes(b"- [ ] caf\xe9 menu\n- [ ] Checkout\n")

    meta = generate_implementation_metadata(spec_dir, store=FileSpecStore(paths), clock=fixed_clock)

    assert [t.description for t in meta.tasks] == ["caf\ufffd menu", "Checkout"]
    assert (spec_dir / "implementation.meta.json").exists()


def test_setup_hooks_writes_executable_scripts(paths):
    written = setup_hooks(paths)

    assert [p.name for p in written] == ["spec-validation.sh", "implementation-ready.sh"]
    for p in written:
        assert p.read_text(encoding="utf-8").startswith("#!/bin/bash\n")
        assert stat.S_IMODE(p.stat().st_mode) == 0o755
    assert 'kiro-bridge validate "$SPEC_DIR"' in written[0].read_text(encoding="utf-8")
