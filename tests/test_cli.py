import json

from kirobridge.cli import main as bridge_cli
from kirobridge.cli import sync as sync_cli
from kirobridge.cli import validate_code as validate_cli
from kirobridge.data.constants import REQUIRED_SPEC_FILES


def test_init_prints_next_steps(paths, capsys):
    code = bridge_cli.main(["init", "Build", "a", "todo", "app", "--root", str(paths.root)])

    out = capsys.readouterr().out
    assert code == 0
    assert "Next steps:" in out
    project_dirs = list(paths.specs_dir.iterdir())
    assert len(project_dirs) == 1
    config = json.loads((project_dirs[0] / "kiro.config.json").read_text(encoding="utf-8"))
    assert config["requirements"] == "Build a todo app"


def test_validate_exit_codes(paths, capsys, write_spec):
    complete = write_spec(paths, "complete", {name: "x" for name in REQUIRED_SPEC_FILES})
    partial = write_spec(paths, "partial", {REQUIRED_SPEC_FILES[0]: "x"})

    assert bridge_cli.main(["validate", str(complete), "--root", str(paths.root)]) == 0
    assert bridge_cli.main(["validate", str(partial), "--root", str(paths.root)]) == 1
    captured = capsys.readouterr()
    assert "SPEC VALIDATION" in captured.out
    assert "Missing files: 002-user-stories.md" in captured.err


def test_validate_defaults_to_latest_link(paths, capsys, write_spec):
    spec_dir = write_spec(paths, "2026-01-01T00-00-00-000Z", {name: "x" for name in REQUIRED_SPEC_FILES})
    paths.latest_link.symlink_to(spec_dir, target_is_directory=True)

    assert bridge_cli.main(["validate", "--root", str(paths.root)]) == 0


def test_metadata_command_writes_file(paths, capsys, write_spec):
    spec_dir = write_spec(paths, "s1", {"006-implementation-tasks.md": "- [ ] one\n"})

    code = bridge_cli.main(["metadata", str(spec_dir), "--root", str(paths.root)])

    assert code == 0
    assert (spec_dir / "implementation.meta.json").exists()
    assert "estimatedTime: 1" in capsys.readouterr().out


def test_metadata_command_accepts_invalid_utf8(paths, capsys, write_spec):
    spec_dir = write_spec(paths, "s1")
    (spec_dir / "003-technical-design.md").write_bytes(b"Uses react@18.2.0 \xff\n")

    assert bridge_cli.main(["metadata", str(spec_dir), "--root", str(paths.root)]) == 0
    assert "react@18.2.0" in capsys.readouterr().out


def test_setup_hooks_command(paths, capsys):
    assert bridge_cli.main(["setup-hooks", "--root", str(paths.root)]) == 0
    assert (paths.hooks_dir / "spec-validation.sh").exists()


def test_sync_without_specs_exits_non_zero(paths, capsys):
    assert sync_cli.main(["--root", str(paths.root)]) == 1
    assert "Sync failed: No spec directories found" in capsys.readouterr().err


def test_sync_reports_outputs(paths, capsys, write_spec):
    write_spec(paths, "2026-01-01T00-00-00-000Z", {"004-api-specification.md": "GET /health\n"})

    assert sync_cli.main(["--root", str(paths.root)]) == 0
    captured = capsys.readouterr()
    assert "API stubs: 1" in captured.out
    assert "Warning: Skipped type generation" in captured.err


def test_validate_code_exit_status(paths, capsys, monkeypatch):
    def no_npm(*args, **kwargs):
        raise FileNotFoundError("npm")

    monkeypatch.setattr("kirobridge.conventions.external.subprocess.run", no_npm)
    (paths.root / "src").mkdir()
    (paths.root / "src" / "a.ts").write_text("eval('x');\n", encoding="utf-8")

    code = validate_cli.main(["--root", str(paths.root)])

    assert code == 1
    assert paths.validation_report_json.exists()
    assert "[FAIL] security" in capsys.readouterr().out
