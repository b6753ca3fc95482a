# src/kirobridge/cli/validate_code.py
from __future__ import annotations

import argparse
import sys

from ..conventions.checker import ConventionChecker
from ..errors import BridgeError
from .common import add_common_flags, configure_logging, workspace_from_args


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kiro-validate-code", description="Run convention and security checks")
    add_common_flags(p)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    paths = workspace_from_args(args)
    print("Validating code...\n")
    try:
        report = ConventionChecker(paths).run()
    except (BridgeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for name, check in report.checks.items():
        status = "SKIP" if check.skipped else ("OK" if check.passed else "FAIL")
        print(f"[{status:>4}] {name} ({len(check.issues)} issues)")

    print("\n" + "=" * 50)
    if report.passed:
        print("All checks passed.")
        return 0
    print("Checks found problems.")
    print(f"\nSee {paths.validation_report_json} for details.")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
