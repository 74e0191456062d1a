"""Filesystem primitives used by the packager.

Rules:
- text is read and written as UTF-8 with newlines left untouched
- undecodable bytes round-trip through surrogate escapes
- directories are created one level at a time; callers order the levels
"""
from __future__ import annotations

import os


class LocalFileSystem:
    def read_text(self, path: str) -> str:
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            return handle.read()

    def write_text(self, path: str, text: str) -> None:
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            handle.write(text)

    def make_dir(self, path: str) -> None:
        os.mkdir(path)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)
