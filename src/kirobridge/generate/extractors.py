# src/kirobridge/generate/extractors.py
"""Regex-based extraction from spec markdown.

None of these are real parsers. Known limitations:
- interfaces: the body is captured up to the first '}', so nested braces cut
  the declaration short
- type aliases: the body runs to the first ';'
- routes: matched anywhere on a line; no escaping or code-fence awareness
- tasks: only unchecked '- [ ]' items are seen; headings are '## ' only

Each extractor is a pure function over text so it can be replaced without
touching the generator.
"""
from __future__ import annotations

import re

from ..data.spec_types import PhaseTask, Route, TaskItem, TypeDecl

INTERFACE_RE = re.compile(r"interface\s+(\w+)\s*{([^}]+)}")
TYPE_ALIAS_RE = re.compile(r"type\s+(\w+)\s*=\s*([^;]+);")
ROUTE_RE = re.compile(r"(GET|POST|PUT|DELETE|PATCH)\s+(/[\w\-/{}]+)")
CHECKBOX_TASK_RE = re.compile(r"- \[ \] (.+)")
UNCHECKED_MARKER = "- [ ]"
PHASE_HEADING_PREFIX = "## "
# Versioned package references such as "react@18.2.0" or "@types/node@20.1".
DEPENDENCY_RE = re.compile(r"@?[\w\-/]+@[\d.]+")


def extract_type_decls(text: str) -> list[TypeDecl]:
    """Returns interface declarations followed by type aliases, each in document order."""
    out: list[TypeDecl] = []
    for m in INTERFACE_RE.finditer(text):
        body = m.group(0)[m.group(0).index("{"):]
        out.append(TypeDecl(kind="interface", name=m.group(1), text=f"interface {m.group(1)} {body}"))
    for m in TYPE_ALIAS_RE.finditer(text):
        out.append(TypeDecl(kind="type", name=m.group(1), text=m.group(0)))
    return out


def extract_routes(text: str) -> list[Route]:
    return [Route(method=m.group(1), path=m.group(2)) for m in ROUTE_RE.finditer(text)]


def extract_tasks(text: str) -> list[PhaseTask]:
    """Walks the document line by line, attaching each unchecked item to the current '## ' heading."""
    tasks: list[PhaseTask] = []
    phase = ""
    for line in text.split("\n"):
        if line.startswith(PHASE_HEADING_PREFIX):
            phase = line[len(PHASE_HEADING_PREFIX):].strip()
        elif UNCHECKED_MARKER in line:
            tasks.append(PhaseTask(phase=phase, description=line.replace(UNCHECKED_MARKER, "", 1).strip()))
    return tasks


def extract_checkbox_tasks(text: str) -> list[TaskItem]:
    return [TaskItem(description=m.group(1)) for m in CHECKBOX_TASK_RE.finditer(text)]


def extract_dependencies(text: str) -> list[str]:
    """Returns unique versioned package identifiers in first-seen order."""
    return list(dict.fromkeys(DEPENDENCY_RE.findall(text)))
