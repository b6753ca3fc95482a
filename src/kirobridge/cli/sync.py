# src/kirobridge/cli/sync.py
from __future__ import annotations

import argparse
import sys

from ..errors import BridgeError
from ..generate.generator import ArtifactGenerator
from .common import add_common_flags, configure_logging, workspace_from_args


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kiro-sync", description="Regenerate stubs from the newest Kiro spec")
    add_common_flags(p)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    print("Syncing spec...\n")
    try:
        result = ArtifactGenerator(workspace_from_args(args)).sync()
    except (BridgeError, OSError) as e:
        print(f"Sync failed: {e}", file=sys.stderr)
        return 1

    print(f"Spec: {result.spec_dir.name}\n")
    if result.types_file is not None:
        print(f"Types: {result.types_file}")
    print(f"API stubs: {len(result.api_stubs)}")
    if result.task_list is not None:
        print(f"Tasks: {result.task_count} -> {result.task_list}")
    for w in result.warnings:
        print(f"Warning: {w}", file=sys.stderr)

    print("\nSync complete. Implementation can start.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
