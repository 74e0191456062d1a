from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence

from _fs import LocalFileSystem

from .node_modules import find_node_module_import
from .options import PackageOptions
from .rewrite import COMPILED_EXTENSION, RELATIVE_IMPORT_RE, relative_specifier


@dataclass(frozen=True)
class ResolvedImport:
    specifier: str
    path: str
    relative: bool
    replacement: Optional[str] = None


def should_skip_import(specifier: str, skip: Sequence[str]) -> bool:
    return any(specifier.startswith(prefix) for prefix in skip)


def is_relative_import(specifier: str) -> bool:
    return bool(RELATIVE_IMPORT_RE.match(specifier))


def resolve_relative_import(specifier: str, importer: str) -> str:
    # ESM specifiers name the compiled artifact, so the extension is implied.
    target = os.path.normpath(os.path.join(os.path.dirname(importer), specifier))
    return target + COMPILED_EXTENSION


def resolve_bare_import(
    specifier: str,
    importer: str,
    options: PackageOptions,
    fs: LocalFileSystem,
) -> str:
    alias = options.resolve_alias.get(specifier)
    if alias:
        return alias
    return find_node_module_import(options.repo_root, specifier, importer, fs)


def resolve_import(
    specifier: str,
    importer: str,
    options: PackageOptions,
    fs: LocalFileSystem,
) -> Optional[ResolvedImport]:
    """Resolve one specifier of ``importer``; ``None`` means it is skipped."""
    if should_skip_import(specifier, options.resolve_skip):
        return None
    if is_relative_import(specifier):
        return ResolvedImport(
            specifier=specifier,
            path=resolve_relative_import(specifier, importer),
            relative=True,
        )
    target = resolve_bare_import(specifier, importer, options, fs)
    return ResolvedImport(
        specifier=specifier,
        path=target,
        relative=False,
        replacement=relative_specifier(importer, target, options),
    )
