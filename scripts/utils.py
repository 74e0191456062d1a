from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Set


@dataclass
class ToolState:
    missing: Set[str] = field(default_factory=set)
    used: Set[str] = field(default_factory=set)


def progress(message: str, done: bool = False) -> None:
    """Print a progress message to stderr (doesn't interfere with stdout output)."""
    if done:
        print(f"  [done] {message}", file=sys.stderr)
    else:
        print(f"  [....] {message}", file=sys.stderr)


def run_cmd(
    cmd: Sequence[str],
    *,
    cwd: Optional[Path],
    warnings: List[str],
    tools: ToolState,
) -> Optional[subprocess.CompletedProcess]:
    tool = cmd[0]
    if tool in tools.missing:
        return None
    tools.used.add(tool)
    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            check=False,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError:
        tools.missing.add(tool)
        warnings.append(f"Missing tool: {tool}")
        return None


def first_line(result: Optional[subprocess.CompletedProcess]) -> Optional[str]:
    if not result or result.returncode != 0 or not result.stdout:
        return None
    lines = result.stdout.splitlines()
    if not lines:
        return None
    return lines[0].strip() or None
