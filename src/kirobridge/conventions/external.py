# src/kirobridge/conventions/external.py
from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import ExternalToolError


@dataclass(frozen=True, slots=True)
class CommandResult:
    cmd: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


CommandRunner = Callable[[Sequence[str], Path, float], CommandResult]


def run_command(cmd: Sequence[str], cwd: Path, timeout_s: float) -> CommandResult:
    """Runs an external tool and captures its output.

    Raises:
        ExternalToolError: If the command cannot be started or exceeds timeout_s.
    """
    try:
        p = subprocess.run(
            list(cmd),
            cwd=cwd,
            text=True,
            capture_output=True,
            timeout=timeout_s,
        )
    except subprocess.TimeoutExpired as e:
        raise ExternalToolError(
            f"Command timed out after {timeout_s:g}s: {' '.join(cmd)}",
            data={"cmd": list(cmd), "timeout_s": timeout_s},
        ) from e
    except OSError as e:
        raise ExternalToolError(
            f"Command could not be started: {' '.join(cmd)} ({e})",
            data={"cmd": list(cmd)},
        ) from e
    return CommandResult(cmd=tuple(cmd), returncode=p.returncode, stdout=p.stdout or "", stderr=p.stderr or "")
