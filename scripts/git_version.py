from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from utils import ToolState, first_line, run_cmd

COMMIT_RE = re.compile(r"^[0-9a-f]{40}$")


def _read_first_line(path: Path) -> Optional[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return None
    line = text.splitlines()[0].strip() if text else ""
    return line or None


def _packed_ref(git_dir: Path, ref: str) -> Optional[str]:
    try:
        lines = (git_dir / "packed-refs").read_text(encoding="utf-8").splitlines()
    except OSError:
        return None
    for line in lines:
        if not line or line.startswith(("#", "^")):
            continue
        parts = line.split(" ", 1)
        if len(parts) == 2 and parts[1].strip() == ref:
            return parts[0].strip()
    return None


def read_git_metadata(repo_root: Path) -> Optional[str]:
    git_dir = repo_root / ".git"
    head = _read_first_line(git_dir / "HEAD")
    if not head:
        return None
    if COMMIT_RE.match(head):
        return head
    if not head.startswith("ref:"):
        return None
    ref = head[len("ref:") :].strip()
    commit = _read_first_line(git_dir / ref)
    if commit and COMMIT_RE.match(commit):
        return commit
    return _packed_ref(git_dir, ref)


def get_git_version(repo_root: str, tools: Optional[ToolState] = None) -> Optional[str]:
    """Commit id checked out at ``repo_root``, or None when it cannot be determined."""
    root = Path(repo_root)
    commit = read_git_metadata(root)
    if commit:
        return commit
    warnings: List[str] = []
    result = run_cmd(
        ["git", "rev-parse", "HEAD"],
        cwd=root,
        warnings=warnings,
        tools=tools or ToolState(),
    )
    commit = first_line(result)
    if commit and COMMIT_RE.match(commit):
        return commit
    return None
