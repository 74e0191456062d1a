from __future__ import annotations

import json
import os
from typing import Any, Dict, List

from _fs import LocalFileSystem

from .errors import (
    InvalidManifestError,
    MissingEntryFileError,
    MissingManifestError,
    MissingModuleFieldError,
    NodeModuleNotFoundError,
)

NODE_MODULES_DIR = "node_modules"
MANIFEST_NAME = "package.json"
ENTRY_FIELD = "module"


def node_module_candidates(repo_root: str, module: str, importer: str) -> List[str]:
    """Candidate package directories, closest ancestor of ``importer`` first."""
    source_dir = os.path.dirname(importer)
    candidates: List[str] = []
    while len(source_dir) >= len(repo_root):
        candidates.append(os.path.normpath(os.path.join(source_dir, NODE_MODULES_DIR, module)))
        parent = os.path.dirname(source_dir)
        if parent == source_dir:
            break
        source_dir = parent
    return candidates


def find_node_module(repo_root: str, module: str, importer: str, fs: LocalFileSystem) -> str:
    for candidate in node_module_candidates(repo_root, module, importer):
        if fs.exists(candidate):
            return candidate
    raise NodeModuleNotFoundError(module, importer)


def read_manifest(module_path: str, fs: LocalFileSystem) -> Dict[str, Any]:
    manifest_path = os.path.join(module_path, MANIFEST_NAME)
    if not fs.exists(manifest_path):
        raise MissingManifestError(manifest_path, module_path)
    try:
        payload = json.loads(fs.read_text(manifest_path))
    except json.JSONDecodeError as exc:
        raise InvalidManifestError(manifest_path, str(exc)) from exc
    if not isinstance(payload, dict):
        raise MissingModuleFieldError(manifest_path)
    return payload


def find_node_module_import(repo_root: str, module: str, importer: str, fs: LocalFileSystem) -> str:
    module_path = find_node_module(repo_root, module, importer, fs)
    manifest = read_manifest(module_path, fs)
    entry = manifest.get(ENTRY_FIELD)
    if not isinstance(entry, str):
        raise MissingModuleFieldError(os.path.join(module_path, MANIFEST_NAME))
    result = os.path.normpath(os.path.join(module_path, entry))
    if not fs.exists(result):
        raise MissingEntryFileError(result)
    return result
