# src/kirobridge/conventions/models.py
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Issue:
    """A single finding. `file` is relative to the workspace root; `line` is 1-based."""

    message: str
    file: str | None = None
    line: int | None = None

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {}
        if self.file is not None:
            out["file"] = self.file
        if self.line is not None:
            out["line"] = self.line
        out["issue"] = self.message
        return out


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one named check.

    A skipped check is reported as passing; `details` carries the reason and
    any check-specific numbers (coverage, completion rate, missing dirs).
    """

    name: str
    passed: bool
    issues: tuple[Issue, ...] = ()
    details: dict[str, object] = field(default_factory=dict)
    skipped: bool = False

    @staticmethod
    def from_issues(name: str, issues: list[Issue], **details: object) -> "CheckResult":
        return CheckResult(name=name, passed=not issues, issues=tuple(issues), details=dict(details))

    @staticmethod
    def skip(name: str, reason: str) -> "CheckResult":
        return CheckResult(name=name, passed=True, details={"reason": reason}, skipped=True)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "passed": self.passed,
            "issues": [i.to_dict() for i in self.issues],
        }
        if self.skipped:
            out["skipped"] = True
        out.update(self.details)
        return out


@dataclass(frozen=True, slots=True)
class ConventionReport:
    """Aggregate of every check, persisted once as validation-report.json."""

    timestamp: str
    checks: dict[str, CheckResult]
    metrics: dict[str, object] = field(default_factory=dict)
    config_sources: tuple[dict[str, object], ...] = ()

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks.values())

    @property
    def issue_groups(self) -> list[dict[str, object]]:
        return [
            {"category": name, "issues": [i.to_dict() for i in check.issues]}
            for name, check in self.checks.items()
            if check.issues
        ]

    def to_dict(self) -> dict[str, object]:
        return {
            "timestamp": self.timestamp,
            "passed": self.passed,
            "checks": {name: c.to_dict() for name, c in self.checks.items()},
            "metrics": dict(self.metrics),
            "issues": self.issue_groups,
            "config": list(self.config_sources),
        }
