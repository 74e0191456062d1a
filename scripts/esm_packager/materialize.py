from __future__ import annotations

import os
from typing import Iterable, Set

from _fs import LocalFileSystem


class DirectoryMaterializer:
    """Creates destination directories parent-first, at most once per run."""

    def __init__(self, fs: LocalFileSystem, seen: Iterable[str] = ()) -> None:
        self.fs = fs
        self.created: Set[str] = set(seen)

    def ensure(self, directory: str) -> None:
        if directory in self.created:
            return
        parent = os.path.dirname(directory)
        if parent and parent != directory:
            self.ensure(parent)
        self.created.add(directory)
        try:
            self.fs.make_dir(directory)
        except FileExistsError:
            pass
