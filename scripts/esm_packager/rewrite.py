from __future__ import annotations

import os
import re

from .destination import compute_destination_path
from .options import PackageOptions
from .scanner import ImportReference

RELATIVE_IMPORT_RE = re.compile(r"^\.\.?/")
COMPILED_EXTENSION = ".js"


def relative_specifier(importer: str, target: str, options: PackageOptions) -> str:
    """Specifier that reaches ``target`` from ``importer`` once both are packaged."""
    importer_destination = compute_destination_path(importer, options)
    target_destination = compute_destination_path(target, options)
    relative = os.path.relpath(target_destination, os.path.dirname(importer_destination))
    relative = relative.replace("\\", "/")
    if not RELATIVE_IMPORT_RE.match(relative):
        relative = "./" + relative
    if relative.endswith(COMPILED_EXTENSION):
        relative = relative[: -len(COMPILED_EXTENSION)]
    return relative


def splice_specifier(text: str, reference: ImportReference, replacement: str) -> str:
    return text[: reference.start + 1] + replacement + text[reference.end :]
