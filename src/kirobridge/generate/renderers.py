# src/kirobridge/generate/renderers.py
from __future__ import annotations

from collections.abc import Sequence

from ..data.constants import GENERATED_EXTENSION
from ..data.spec_types import PhaseTask, Route, TypeDecl

TYPES_HEADER = """// Auto-generated type definitions
// Generated at: {generated_at}
// WARNING: this file is regenerated by kiro-sync. Do not edit it by hand.

"""

ROUTE_STUB = """// {method} {path}
// Auto-generated API stub. Regenerated by kiro-sync; do not edit by hand.

import {{ Request, Response, NextFunction }} from 'express';

export async function handler(
  req: Request,
  res: Response,
  next: NextFunction
): Promise<void> {{
  try {{
    // TODO: implement handler
    res.json({{
      message: '{method} {path} - Not implemented yet'
    }});
  }} catch (error) {{
    next(error);
  }}
}}
"""

TASK_LIST_HEADER = """<!-- Generated by kiro-sync. Do not edit by hand. -->
# Implementation Task List
Generated at: {generated_at}

## Progress Summary
- Total tasks: {total}
- Completed: 0
- Progress: 0%

"""


def render_types_file(decls: Sequence[TypeDecl], *, generated_at: str) -> str:
    parts = [TYPES_HEADER.format(generated_at=generated_at)]
    for d in decls:
        parts.append(f"export {d.text}\n\n")
    return "".join(parts)


def route_file_name(route: Route) -> str:
    """Derives the stub file name: '/users/{id}' -> 'users-{id}.ts'."""
    return route.path.replace("/", "-")[1:] + GENERATED_EXTENSION


def render_route_stub(route: Route) -> str:
    return ROUTE_STUB.format(method=route.method, path=route.path)


def render_task_list(tasks: Sequence[PhaseTask], *, generated_at: str) -> str:
    """Renders TASKS.md grouped by phase in document order.

    A heading is emitted whenever the phase changes, so tasks that appear
    before any heading are listed under the summary without one.
    """
    parts = [TASK_LIST_HEADER.format(generated_at=generated_at, total=len(tasks))]
    current = ""
    for t in tasks:
        if t.phase != current:
            current = t.phase
            parts.append(f"\n## {current}\n\n")
        parts.append(f"- [ ] {t.description}\n")
    return "".join(parts)
