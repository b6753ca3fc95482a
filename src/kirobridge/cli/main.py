# src/kirobridge/cli/main.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..data.spec_store import FileSpecStore
from ..errors import BridgeError
from ..spec.hooks import setup_hooks
from ..spec.initializer import SpecInitializer
from ..spec.metadata import generate_implementation_metadata
from ..spec.validator import validate_spec
from .common import add_common_flags, configure_logging, print_yaml, workspace_from_args


def _spec_dir_arg(args: argparse.Namespace) -> Path:
    """Resolves the optional [dir] argument, defaulting to <specs>/latest."""
    if args.spec_dir:
        return Path(args.spec_dir)
    return workspace_from_args(args).latest_link


def cmd_init(args: argparse.Namespace) -> int:
    """Creates a new spec project from the requirement text."""
    paths = workspace_from_args(args)
    project_dir = SpecInitializer(paths).init(" ".join(args.requirements))

    print(f"Initialized Kiro spec project: {project_dir}")
    print("\nNext steps:")
    print("1. Open the Kiro IDE")
    print(f"2. Open {project_dir / '000-requirements.md'}")
    print("3. Run spec generation")
    print("4. When it finishes, run kiro-sync")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Checks a spec directory for the required documents."""
    result = validate_spec(_spec_dir_arg(args))
    print_yaml("SPEC VALIDATION", result)
    if not result.complete:
        print(f"Missing files: {', '.join(result.missing)}", file=sys.stderr)
        return 1
    return 0


def cmd_metadata(args: argparse.Namespace) -> int:
    """Writes implementation.meta.json for a spec directory."""
    paths = workspace_from_args(args)
    metadata = generate_implementation_metadata(_spec_dir_arg(args), store=FileSpecStore(paths))
    print_yaml("IMPLEMENTATION METADATA", metadata)
    return 0


def cmd_setup_hooks(args: argparse.Namespace) -> int:
    """Installs the Kiro hook scripts."""
    written = setup_hooks(workspace_from_args(args))
    print("Installed Kiro hooks:")
    for p in written:
        print(f"  - {p}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Builds the CLI parser."""
    p = argparse.ArgumentParser(prog="kiro-bridge", description="Bridge between Kiro specs and the project tree")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_init = sub.add_parser("init", help="Initialize a new spec project")
    sp_init.add_argument("requirements", nargs="+", help="Free-text requirements")
    add_common_flags(sp_init)
    sp_init.set_defaults(func=cmd_init)

    sp_validate = sub.add_parser("validate", help="Check a spec directory for required documents")
    sp_validate.add_argument("spec_dir", nargs="?", default=None, help="Spec directory (default: .kiro/specs/latest)")
    add_common_flags(sp_validate)
    sp_validate.set_defaults(func=cmd_validate)

    sp_meta = sub.add_parser("metadata", help="Generate implementation metadata")
    sp_meta.add_argument("spec_dir", nargs="?", default=None, help="Spec directory (default: .kiro/specs/latest)")
    add_common_flags(sp_meta)
    sp_meta.set_defaults(func=cmd_metadata)

    sp_hooks = sub.add_parser("setup-hooks", help="Install Kiro hook scripts")
    add_common_flags(sp_hooks)
    sp_hooks.set_defaults(func=cmd_setup_hooks)

    return p


def main(argv: list[str] | None = None) -> int:
    """Runs the CLI entrypoint."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except (BridgeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
