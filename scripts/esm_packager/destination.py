from __future__ import annotations

import os
from typing import Mapping

from .options import PackageOptions


def is_under(path: str, directory: str) -> bool:
    if path == directory:
        return True
    prefix = directory if directory.endswith(("/", "\\")) else directory + os.sep
    return path.startswith(prefix)


def apply_destination_folder_simplifications(file_path: str, simplifications: Mapping[str, str]) -> str:
    """Apply each literal replacement until its pattern no longer occurs.

    Works on ``/`` separated text; a replacement must not reintroduce its pattern.
    """
    file_path = file_path.replace("\\", "/")
    for pattern, replacement in simplifications.items():
        test = pattern.replace("\\", "/")
        if not test:
            continue
        while test in file_path:
            file_path = file_path.replace(test, replacement, 1)
    return file_path


def compute_destination_path(file_path: str, options: PackageOptions) -> str:
    source_dir = options.source_dir
    destination_dir = options.destination_dir
    if is_under(file_path, source_dir):
        return os.path.normpath(os.path.join(destination_dir, os.path.relpath(file_path, source_dir)))
    # Third-party files keep their repo-relative layout under the destination.
    mirrored = os.path.join(destination_dir, os.path.relpath(file_path, options.repo_root))
    return os.path.normpath(
        apply_destination_folder_simplifications(mirrored, options.destination_folder_simplification)
    )
