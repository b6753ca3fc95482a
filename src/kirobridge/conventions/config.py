# src/kirobridge/conventions/config.py
from __future__ import annotations

import hashlib
import re
from collections.abc import Mapping
from dataclasses import dataclass
from importlib import resources

import yaml  # PyYAML

from ..data.paths import WorkspacePaths
from ..errors import ConfigError

DEFAULT_RESOURCE = "resources/conventions_v1.yaml"

# Every bucket classify_import can return; import_order must rank all of them.
IMPORT_CATEGORIES = frozenset({"framework", "external", "internal", "relative", "types"})


@dataclass(frozen=True, slots=True)
class ConfigRef:
    """Provenance of the configuration used for a run (hash of the resolved bytes)."""

    source: str
    version: int
    sha256: str


@dataclass(frozen=True, slots=True)
class SecurityPattern:
    id: str
    pattern: re.Pattern[str]
    message: str


@dataclass(frozen=True, slots=True)
class ConventionConfig:
    source_dir: str
    source_extensions: tuple[str, ...]
    typed_extensions: tuple[str, ...]
    component_extension: str
    components_segment: str
    required_dirs: tuple[str, ...]
    import_order: tuple[str, ...]
    max_function_lines: int
    max_nesting: int
    min_line_coverage: float
    test_coverage_cmd: tuple[str, ...]
    type_check_cmd: tuple[str, ...]
    timeout_s: float
    security_patterns: tuple[SecurityPattern, ...]
    refs: tuple[ConfigRef, ...] = ()

    @staticmethod
    def from_dict(d: Mapping[str, object], *, refs: tuple[ConfigRef, ...] = ()) -> "ConventionConfig":
        """Builds the config from the merged `conventions:` mapping.

        Raises:
            ConfigError: If a key is missing or has the wrong shape.
        """
        try:
            limits = d["limits"]
            commands = d["commands"]
            if not isinstance(limits, Mapping) or not isinstance(commands, Mapping):
                raise ConfigError("conventions.limits and conventions.commands must be mappings")

            import_order = tuple(str(x) for x in d["import_order"])
            if len(set(import_order)) != len(import_order) or set(import_order) != IMPORT_CATEGORIES:
                raise ConfigError(
                    "conventions.import_order must list each of "
                    f"{', '.join(sorted(IMPORT_CATEGORIES))} exactly once",
                    data={"import_order": list(import_order), "sources": [r.source for r in refs]},
                )

            patterns: list[SecurityPattern] = []
            for item in d["security_patterns"]:
                flags = re.IGNORECASE if item.get("ignore_case") else 0
                patterns.append(
                    SecurityPattern(
                        id=str(item["id"]),
                        pattern=re.compile(str(item["pattern"]), flags),
                        message=str(item["message"]),
                    )
                )

            return ConventionConfig(
                source_dir=str(d["source_dir"]),
                source_extensions=tuple(str(x) for x in d["source_extensions"]),
                typed_extensions=tuple(str(x) for x in d["typed_extensions"]),
                component_extension=str(d["component_extension"]),
                components_segment=str(d["components_segment"]),
                required_dirs=tuple(str(x) for x in d["required_dirs"]),
                import_order=import_order,
                max_function_lines=int(limits["max_function_lines"]),
                max_nesting=int(limits["max_nesting"]),
                min_line_coverage=float(limits["min_line_coverage"]),
                test_coverage_cmd=tuple(str(x) for x in commands["test_coverage"]),
                type_check_cmd=tuple(str(x) for x in commands["type_check"]),
                timeout_s=float(commands.get("timeout_s", 600)),
                security_patterns=tuple(patterns),
                refs=refs,
            )
        except ConfigError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError, re.error) as e:
            raise ConfigError(
                f"Invalid conventions config: {type(e).__name__}: {e}",
                data={"sources": [r.source for r in refs]},
            ) from e


def _sha256_bytes(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()


def _conventions_section(raw: object, source: str) -> dict[str, object]:
    if not isinstance(raw, Mapping) or not isinstance(raw.get("conventions"), Mapping):
        raise ConfigError(f"{source} must contain a top-level 'conventions' mapping", data={"source": source})
    return dict(raw["conventions"])


def load_convention_config(paths: WorkspacePaths, *, package: str = "kirobridge") -> ConventionConfig:
    """Loads shipped defaults, then applies <root>/.kiro/conventions.yaml if present.

    Defaults are read through importlib.resources so they resolve from an
    installed wheel as well as a source checkout.
    """
    data = resources.files(package).joinpath(DEFAULT_RESOURCE).read_bytes()
    try:
        merged = _conventions_section(yaml.safe_load(data.decode("utf-8")), DEFAULT_RESOURCE)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {DEFAULT_RESOURCE}: {e}") from e
    refs = [ConfigRef(source=DEFAULT_RESOURCE, version=int(merged.get("version", 1)), sha256=_sha256_bytes(data))]

    override = paths.conventions_override_yaml
    if override.is_file():
        odata = override.read_bytes()
        try:
            section = _conventions_section(yaml.safe_load(odata.decode("utf-8")), str(override))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {override}: {e}", data={"source": str(override)}) from e
        merged.update(section)
        refs.append(
            ConfigRef(source=str(override), version=int(merged.get("version", 1)), sha256=_sha256_bytes(odata))
        )

    return ConventionConfig.from_dict(merged, refs=tuple(refs))
