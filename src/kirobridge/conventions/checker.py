# src/kirobridge/conventions/checker.py
from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from ..data.paths import WorkspacePaths
from ..data.spec_store import FileSpecStore, write_json
from ..errors import ExternalToolError, MalformedMetadataError
from ..utils.timestamps import Clock, iso_timestamp, utc_now
from .config import ConventionConfig, load_convention_config
from .external import CommandRunner, run_command
from .models import CheckResult, ConventionReport, Issue

logger = logging.getLogger(__name__)

COMPONENT_NAME_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
# Unindented `const`/`export const` bindings whose name starts upper-case.
CONSTANT_BINDING_RE = re.compile(r"^(?:export\s+)?const\s+([A-Z][A-Za-z0-9_]*)\s*=", re.MULTILINE)
UPPER_SNAKE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")

FUNCTION_MARKERS = ("function", "=>")

# Check names, in run order. They double as keys in validation-report.json.
CHECK_NAMING = "naming"
CHECK_STRUCTURE = "structure"
CHECK_IMPORTS = "imports"
CHECK_COMPLEXITY = "complexity"
CHECK_SPEC_COMPLIANCE = "specCompliance"
CHECK_TEST_COVERAGE = "testCoverage"
CHECK_TYPE_SAFETY = "typeSafety"
CHECK_SECURITY = "security"


def classify_import(line: str) -> str:
    """Buckets an import line by substring; the first matching rule wins."""
    if "react" in line:
        return "framework"
    if "type " in line:
        return "types"
    if "./" in line or "../" in line:
        return "relative"
    if "@/" in line:
        return "internal"
    return "external"


def max_nesting_depth(text: str) -> int:
    """Maximum running brace depth over the file. Braces in strings and comments count too."""
    depth = 0
    deepest = 0
    for line in text.split("\n"):
        depth += line.count("{") - line.count("}")
        deepest = max(deepest, depth)
    return deepest


def long_functions(text: str, max_lines: int) -> list[tuple[int, int]]:
    """Returns (start_line, length) for every function body longer than max_lines.

    A line mentioning `function` or `=>` starts a function (restarting any
    function in progress); the function ends on the first line containing '}'
    that brings the brace count back to zero.
    """
    found: list[tuple[int, int]] = []
    start = -1
    depth = 0
    for i, line in enumerate(text.split("\n")):
        if any(marker in line for marker in FUNCTION_MARKERS):
            start = i
            depth = 0
        if start == -1:
            continue
        depth += line.count("{") - line.count("}")
        if depth == 0 and "}" in line:
            length = i - start + 1
            if length > max_lines:
                found.append((start + 1, length))
            start = -1
    return found


class ConventionChecker:
    """Runs regex-based convention and security checks over <root>/src.

    Only the spec-compliance check touches the spec pipeline, by reading
    <specs>/latest/implementation.meta.json when it exists.
    """

    def __init__(
        self,
        paths: WorkspacePaths,
        *,
        config: ConventionConfig | None = None,
        store: FileSpecStore | None = None,
        runner: CommandRunner = run_command,
        clock: Clock = utc_now,
    ) -> None:
        self.paths = paths
        self.config = config or load_convention_config(paths)
        self.store = store or FileSpecStore(paths)
        self.runner = runner
        self.clock = clock
        self.metrics: dict[str, object] = {}

    # --------------------
    # Source tree helpers
    # --------------------
    @property
    def source_root(self) -> Path:
        return self.paths.root / self.config.source_dir

    def source_files(self) -> list[Path]:
        root = self.source_root
        if not root.is_dir():
            return []
        exts = set(self.config.source_extensions)
        return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix in exts)

    def _typed_files(self) -> list[Path]:
        exts = set(self.config.typed_extensions)
        return [p for p in self.source_files() if p.suffix in exts]

    def _rel(self, p: Path) -> str:
        return p.relative_to(self.paths.root).as_posix()

    @staticmethod
    def _read(p: Path) -> str:
        return p.read_text(encoding="utf-8", errors="replace")

    # --------------------
    # Coding standards
    # --------------------
    def check_naming_conventions(self) -> CheckResult:
        issues: list[Issue] = []
        for f in self.source_files():
            rel = self._rel(f)
            parts = Path(rel).parts[:-1]
            if f.suffix == self.config.component_extension and self.config.components_segment in parts:
                if not COMPONENT_NAME_RE.match(f.stem):
                    issues.append(Issue(file=rel, message=f"Component file names must be PascalCase: {f.stem}"))

            for m in CONSTANT_BINDING_RE.finditer(self._read(f)):
                name = m.group(1)
                if "_" in name and not UPPER_SNAKE_RE.match(name):
                    issues.append(Issue(file=rel, message=f"Constants must be UPPER_SNAKE_CASE: {name}"))
        return CheckResult.from_issues(CHECK_NAMING, issues)

    def check_project_structure(self) -> CheckResult:
        missing = [d for d in self.config.required_dirs if not (self.paths.root / d).is_dir()]
        issues = [Issue(file=d, message=f"Required directory is missing: {d}") for d in missing]
        return CheckResult.from_issues(CHECK_STRUCTURE, issues, missingDirs=missing)

    def check_import_order(self) -> CheckResult:
        order = self.config.import_order
        issues: list[Issue] = []
        for f in self._typed_files():
            previous: str | None = None
            for i, line in enumerate(self._read(f).split("\n"), start=1):
                if not line.startswith("import"):
                    continue
                category = classify_import(line)
                if previous is not None and order.index(category) < order.index(previous):
                    issues.append(
                        Issue(
                            file=self._rel(f),
                            line=i,
                            message=f"Import order: {category} import should come before {previous} imports",
                        )
                    )
                previous = category
        return CheckResult.from_issues(CHECK_IMPORTS, issues)

    def check_code_complexity(self) -> CheckResult:
        max_lines = self.config.max_function_lines
        max_nesting = self.config.max_nesting
        issues: list[Issue] = []
        for f in self._typed_files():
            text = self._read(f)
            rel = self._rel(f)
            for start, length in long_functions(text, max_lines):
                issues.append(
                    Issue(file=rel, line=start, message=f"Function too long ({length} lines); keep it within {max_lines}")
                )
            depth = max_nesting_depth(text)
            if depth > max_nesting:
                issues.append(Issue(file=rel, message=f"Nesting too deep ({depth} levels); keep it within {max_nesting}"))
        return CheckResult.from_issues(CHECK_COMPLEXITY, issues)

    # --------------------
    # Spec compliance
    # --------------------
    def check_spec_compliance(self) -> CheckResult:
        try:
            meta = self.store.read_metadata(self.paths.latest_link)
        except MalformedMetadataError as e:
            logger.warning("Spec compliance: %s", e)
            return CheckResult(name=CHECK_SPEC_COMPLIANCE, passed=False, issues=(Issue(message=str(e)),))
        if meta is None:
            logger.warning("Spec compliance skipped: no implementation metadata under %s", self.paths.latest_link)
            return CheckResult.skip(CHECK_SPEC_COMPLIANCE, "implementation metadata not found")

        contents = [self._read(f).lower() for f in self.source_files()]
        missing: list[str] = []
        for task in meta.tasks:
            keywords = task.description.lower().split()
            if not any(k in c for c in contents for k in keywords):
                missing.append(task.description)

        total = len(meta.tasks)
        implemented = total - len(missing)
        rate = implemented / total * 100 if total else 100.0
        return CheckResult.from_issues(
            CHECK_SPEC_COMPLIANCE,
            [Issue(message=f"Task not implemented: {d}") for d in missing],
            totalTasks=total,
            implementedTasks=implemented,
            missingFeatures=missing,
            completionRate=f"{rate:.1f}%",
        )

    # --------------------
    # External tools
    # --------------------
    def check_test_coverage(self) -> CheckResult:
        """Runs the coverage command. Any failure to run or parse it skips the check."""
        try:
            result = self.runner(self.config.test_coverage_cmd, self.paths.root, self.config.timeout_s)
            if result.returncode != 0:
                raise ExternalToolError(f"Coverage command exited with {result.returncode}")
            total = json.loads(result.stdout)["total"]
            summary = {k: float(total[k]["pct"]) for k in ("lines", "functions", "branches", "statements")}
        except (ExternalToolError, ValueError, KeyError, TypeError) as e:
            logger.warning("Test coverage check skipped: %s", e)
            return CheckResult.skip(CHECK_TEST_COVERAGE, str(e))

        self.metrics["testCoverage"] = summary
        threshold = self.config.min_line_coverage
        issues = []
        if summary["lines"] < threshold:
            issues.append(Issue(message=f"Line coverage {summary['lines']:g}% is below {threshold:g}%"))
        return CheckResult.from_issues(CHECK_TEST_COVERAGE, issues, coverage=summary)

    def check_type_safety(self) -> CheckResult:
        """Runs the type checker. Unlike coverage, a failed invocation fails the check."""
        try:
            result = self.runner(self.config.type_check_cmd, self.paths.root, self.config.timeout_s)
        except ExternalToolError as e:
            return CheckResult(name=CHECK_TYPE_SAFETY, passed=False, issues=(Issue(message=str(e)),))

        errors = [ln for ln in result.stderr.split("\n") if ln.strip()]
        if result.returncode != 0 and not errors:
            errors = [f"Type check exited with {result.returncode}"]
        return CheckResult.from_issues(CHECK_TYPE_SAFETY, [Issue(message=e) for e in errors])

    # --------------------
    # Security
    # --------------------
    def check_security(self) -> CheckResult:
        """Flags each dangerous pattern at most once per file."""
        issues: list[Issue] = []
        for f in self.source_files():
            text = self._read(f)
            for sp in self.config.security_patterns:
                if sp.pattern.search(text):
                    issues.append(Issue(file=self._rel(f), message=sp.message))
        return CheckResult.from_issues(CHECK_SECURITY, issues)

    # --------------------
    # Orchestration
    # --------------------
    def run(self) -> ConventionReport:
        """Runs every check in order and writes validation-report.json."""
        self.metrics = {}
        checks: dict[str, CheckResult] = {}
        for check in (
            self.check_naming_conventions,
            self.check_project_structure,
            self.check_import_order,
            self.check_code_complexity,
            self.check_spec_compliance,
            self.check_test_coverage,
            self.check_type_safety,
            self.check_security,
        ):
            result = check()
            checks[result.name] = result
            logger.info("%s: %s", result.name, "skipped" if result.skipped else ("ok" if result.passed else "failed"))

        report = ConventionReport(
            timestamp=iso_timestamp(self.clock()),
            checks=checks,
            metrics=dict(self.metrics),
            config_sources=tuple(
                {"source": r.source, "version": r.version, "sha256": r.sha256} for r in self.config.refs
            ),
        )
        write_json(self.paths.validation_report_json, report.to_dict())
        return report

    def validate(self) -> bool:
        return self.run().passed
