# src/kirobridge/data/spec_types.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from ..errors import MalformedMetadataError


def _require_str(d: Mapping[str, object], key: str, *, record: str, allow_empty: bool = False) -> str:
    v = d.get(key)
    if not isinstance(v, str):
        raise MalformedMetadataError(
            f"{record}.{key} must be a string",
            data={"record": record, "key": key, "type": type(v).__name__},
        )
    if not allow_empty and not v.strip():
        raise MalformedMetadataError(
            f"{record}.{key} must be a non-empty string",
            data={"record": record, "key": key},
        )
    return v


def _require_bool(d: Mapping[str, object], key: str, *, record: str) -> bool:
    v = d.get(key)
    if not isinstance(v, bool):
        raise MalformedMetadataError(
            f"{record}.{key} must be a boolean",
            data={"record": record, "key": key, "type": type(v).__name__},
        )
    return v


def _require_number(d: Mapping[str, object], key: str, *, record: str) -> float:
    v = d.get(key)
    # bool is an int subclass; reject it explicitly.
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise MalformedMetadataError(
            f"{record}.{key} must be a number",
            data={"record": record, "key": key, "type": type(v).__name__},
        )
    return v


def _require_list(d: Mapping[str, object], key: str, *, record: str) -> list[object]:
    v = d.get(key)
    if not isinstance(v, list):
        raise MalformedMetadataError(
            f"{record}.{key} must be a list",
            data={"record": record, "key": key, "type": type(v).__name__},
        )
    return v


def _require_mapping(x: object, *, record: str) -> Mapping[str, object]:
    if not isinstance(x, Mapping):
        raise MalformedMetadataError(
            f"{record} must be a JSON object",
            data={"record": record, "type": type(x).__name__},
        )
    return x


# --------------------
# Spec project configuration
# --------------------
@dataclass(frozen=True, slots=True)
class HookDescriptor:
    """Names a point where the editor should invoke a follow-on script.

    - name: Identifier of the hook (also the script stem under .kiro/hooks/).
    - trigger: Editor event that fires the hook (e.g. "spec-save").
    - action: What the hook is expected to do (e.g. "validate-consistency").
    """

    name: str
    trigger: str
    action: str

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "trigger": self.trigger, "action": self.action}

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "HookDescriptor":
        d = _require_mapping(d, record="hook")
        return HookDescriptor(
            name=_require_str(d, "name", record="hook"),
            trigger=_require_str(d, "trigger", record="hook"),
            action=_require_str(d, "action", record="hook"),
        )


DEFAULT_HOOKS: tuple[HookDescriptor, ...] = (
    HookDescriptor(name="spec-validation", trigger="spec-save", action="validate-consistency"),
    HookDescriptor(name="claude-notification", trigger="spec-complete", action="notify-implementation-ready"),
)


@dataclass(frozen=True, slots=True)
class KiroConfig:
    """Configuration record written next to a freshly initialized spec (kiro.config.json)."""

    project_name: str
    requirements: str
    output_dir: str
    hooks: tuple[HookDescriptor, ...] = DEFAULT_HOOKS

    def to_dict(self) -> dict[str, object]:
        return {
            "projectName": self.project_name,
            "requirements": self.requirements,
            "outputDir": self.output_dir,
            "hooks": [h.to_dict() for h in self.hooks],
        }

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "KiroConfig":
        d = _require_mapping(d, record="kiro_config")
        hooks = tuple(HookDescriptor.from_dict(h) for h in _require_list(d, "hooks", record="kiro_config"))
        return KiroConfig(
            project_name=_require_str(d, "projectName", record="kiro_config"),
            # Free text; an empty requirement string is legal.
            requirements=_require_str(d, "requirements", record="kiro_config", allow_empty=True),
            output_dir=_require_str(d, "outputDir", record="kiro_config"),
            hooks=hooks,
        )


# --------------------
# Validation
# --------------------
@dataclass(frozen=True, slots=True)
class DocumentStatus:
    exists: bool
    size: int | None = None
    modified: str | None = None

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"exists": self.exists}
        if self.exists:
            out["size"] = self.size
            out["modified"] = self.modified
        return out


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Completeness report for one spec directory.

    Recomputed on every call and never persisted by the validator itself.
    """

    complete: bool
    missing: tuple[str, ...]
    files: dict[str, DocumentStatus]

    def to_dict(self) -> dict[str, object]:
        return {
            "complete": self.complete,
            "missing": list(self.missing),
            "files": {name: status.to_dict() for name, status in self.files.items()},
        }


# --------------------
# Implementation metadata
# --------------------
@dataclass(frozen=True, slots=True)
class TaskItem:
    description: str
    completed: bool = False
    estimated_hours: float = 1

    def to_dict(self) -> dict[str, object]:
        return {
            "description": self.description,
            "completed": self.completed,
            "estimatedHours": self.estimated_hours,
        }

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "TaskItem":
        d = _require_mapping(d, record="task")
        return TaskItem(
            description=_require_str(d, "description", record="task"),
            completed=_require_bool(d, "completed", record="task"),
            estimated_hours=_require_number(d, "estimatedHours", record="task"),
        )


@dataclass(frozen=True, slots=True)
class ImplementationMetadata:
    """Derived record persisted as implementation.meta.json inside a spec directory.

    Regenerated from the spec documents on every run. estimated_time is the
    task count (one placeholder hour per task).
    """

    generated_at: str
    spec_dir: str
    tasks: tuple[TaskItem, ...] = ()
    dependencies: tuple[str, ...] = ()

    @property
    def estimated_time(self) -> int:
        return len(self.tasks)

    def to_dict(self) -> dict[str, object]:
        return {
            "generatedAt": self.generated_at,
            "specDir": self.spec_dir,
            "tasks": [t.to_dict() for t in self.tasks],
            "dependencies": list(self.dependencies),
            "estimatedTime": self.estimated_time,
        }

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "ImplementationMetadata":
        """Parses metadata strictly.

        Raises:
            MalformedMetadataError: If required fields are missing or have the wrong type.
        """
        d = _require_mapping(d, record="implementation_meta")
        tasks = tuple(TaskItem.from_dict(t) for t in _require_list(d, "tasks", record="implementation_meta"))

        deps: list[str] = []
        for item in d.get("dependencies") or []:
            if not isinstance(item, str):
                raise MalformedMetadataError(
                    "implementation_meta.dependencies must contain strings",
                    data={"type": type(item).__name__},
                )
            deps.append(item)

        return ImplementationMetadata(
            generated_at=_require_str(d, "generatedAt", record="implementation_meta"),
            spec_dir=_require_str(d, "specDir", record="implementation_meta"),
            tasks=tasks,
            dependencies=tuple(deps),
        )


# --------------------
# Generation
# --------------------
@dataclass(frozen=True, slots=True)
class PhaseTask:
    """One unchecked checklist line and the '## ' heading it appeared under."""

    phase: str
    description: str
    completed: bool = False


@dataclass(frozen=True, slots=True)
class Route:
    method: str
    path: str


@dataclass(frozen=True, slots=True)
class TypeDecl:
    kind: str  # "interface" | "type"
    name: str
    text: str


@dataclass(frozen=True, slots=True)
class GeneratedFlags:
    types: bool = False
    api_stubs: bool = False
    task_list: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"types": self.types, "apiStubs": self.api_stubs, "taskList": self.task_list}


@dataclass(frozen=True, slots=True)
class SyncProgress:
    """Progress record written to .kiro/specs/sync-progress.json after a sync.

    The generated flags record that a step was attempted, not that it produced output.
    """

    synced_at: str
    spec_dir: str
    generated: GeneratedFlags = field(default_factory=GeneratedFlags)

    def to_dict(self) -> dict[str, object]:
        return {
            "syncedAt": self.synced_at,
            "specDir": self.spec_dir,
            "generated": self.generated.to_dict(),
        }

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "SyncProgress":
        d = _require_mapping(d, record="sync_progress")
        g = _require_mapping(d.get("generated"), record="sync_progress.generated")
        return SyncProgress(
            synced_at=_require_str(d, "syncedAt", record="sync_progress"),
            spec_dir=_require_str(d, "specDir", record="sync_progress"),
            generated=GeneratedFlags(
                types=_require_bool(g, "types", record="sync_progress.generated"),
                api_stubs=_require_bool(g, "apiStubs", record="sync_progress.generated"),
                task_list=_require_bool(g, "taskList", record="sync_progress.generated"),
            ),
        )
