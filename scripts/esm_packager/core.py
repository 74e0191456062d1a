from __future__ import annotations

import os
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Set

from _fs import LocalFileSystem
from utils import progress

from .destination import compute_destination_path
from .imports import resolve_import
from .materialize import DirectoryMaterializer
from .options import PackageOptions
from .rewrite import splice_specifier
from .scanner import Scanner, scan_imports


@dataclass(frozen=True)
class PackagedFile:
    source: str
    destination: str
    rewritten: int


class PackagingSession:
    """One packaging run: owns the worklist, the pending set and created directories."""

    def __init__(
        self,
        options: PackageOptions,
        *,
        fs: Optional[LocalFileSystem] = None,
        scanner: Optional[Scanner] = None,
    ) -> None:
        self.options = options.normalized()
        self.fs = fs if fs is not None else LocalFileSystem()
        self.scanner = scanner if scanner is not None else scan_imports
        self.queue: Deque[str] = deque()
        self.pending: Set[str] = set()
        self.processed: List[PackagedFile] = []
        self.materializer = DirectoryMaterializer(self.fs, seen=[self.options.repo_root])

    def enqueue(self, file_path: str) -> bool:
        file_path = os.path.normpath(file_path)
        if file_path in self.pending:
            return False
        self.pending.add(file_path)
        self.queue.append(file_path)
        return True

    def seed(self) -> None:
        for entry in self.options.entry_points:
            self.enqueue(os.path.join(self.options.source_dir, entry))

    def process_file(self, file_path: str) -> PackagedFile:
        contents = self.fs.read_text(file_path)
        references = self.scanner(contents)
        rewritten = 0
        # Highest offset first: splicing never shifts a span still to be visited.
        for reference in reversed(references):
            resolved = resolve_import(reference.specifier, file_path, self.options, self.fs)
            if resolved is None:
                continue
            if resolved.replacement is not None:
                contents = splice_specifier(contents, reference, resolved.replacement)
                rewritten += 1
            self.enqueue(resolved.path)
        destination = self.write(file_path, contents)
        return PackagedFile(source=file_path, destination=destination, rewritten=rewritten)

    def write(self, file_path: str, contents: str) -> str:
        destination = compute_destination_path(file_path, self.options)
        self.materializer.ensure(os.path.dirname(destination))
        self.fs.write_text(destination, contents)
        return destination

    def run(self) -> List[PackagedFile]:
        progress(f"Packaging {len(self.options.entry_points)} entry point(s) from {self.options.source_dir}")
        self.seed()
        while self.queue:
            file_path = self.queue.popleft()
            self.processed.append(self.process_file(file_path))
        progress(f"Wrote {len(self.processed)} files to {self.options.destination_dir}", done=True)
        return list(self.processed)


def package_esm(
    options: PackageOptions,
    *,
    fs: Optional[LocalFileSystem] = None,
    scanner: Optional[Scanner] = None,
) -> None:
    PackagingSession(options, fs=fs, scanner=scanner).run()
