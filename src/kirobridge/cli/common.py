# src/kirobridge/cli/common.py
from __future__ import annotations

import argparse
import logging
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path

import yaml

from ..data.paths import WorkspacePaths

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _to_primitive(x: object) -> object:
    """Converts objects into YAML-safe primitives.

    The conversion rules are:
    - objects with to_dict() -> their mapping (recursively converted)
    - dataclasses -> dict of field values
    - Enum -> its .value
    - Path -> str(path)
    - Mapping / list / tuple -> converted element-wise
    """
    to_dict = getattr(x, "to_dict", None)
    if callable(to_dict):
        return _to_primitive(to_dict())

    if is_dataclass(x) and not isinstance(x, type):
        return {f.name: _to_primitive(getattr(x, f.name)) for f in fields(x)}

    if isinstance(x, Enum):
        return x.value

    if isinstance(x, Path):
        return str(x)

    if isinstance(x, Mapping):
        return {str(k): _to_primitive(v) for k, v in x.items()}

    if isinstance(x, (list, tuple)):
        return [_to_primitive(v) for v in x]

    return x


def print_yaml(title: str, payload: object) -> None:
    """Prints a human-readable YAML view of structured data."""
    print(f"\n=== {title} ===\n")
    print(yaml.safe_dump(_to_primitive(payload), sort_keys=False, allow_unicode=True))


def add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--root", default=".", help="Workspace root (where .kiro/ lives)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def workspace_from_args(args: argparse.Namespace) -> WorkspacePaths:
    return WorkspacePaths.for_root(Path(args.root))
