from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import OptionsError
from .scanner import mask_comments

OPTION_KEYS = {
    "repoRoot": "repo_root",
    "esmSource": "esm_source",
    "esmDestination": "esm_destination",
    "entryPoints": "entry_points",
    "resolveAlias": "resolve_alias",
    "resolveSkip": "resolve_skip",
    "destinationFolderSimplification": "destination_folder_simplification",
}


@dataclass
class PackageOptions:
    repo_root: str
    esm_source: str
    esm_destination: str
    entry_points: List[str]
    resolve_alias: Dict[str, str] = field(default_factory=dict)
    resolve_skip: List[str] = field(default_factory=list)
    destination_folder_simplification: Dict[str, str] = field(default_factory=dict)

    @property
    def source_dir(self) -> str:
        return os.path.normpath(os.path.join(self.repo_root, self.esm_source))

    @property
    def destination_dir(self) -> str:
        return os.path.normpath(os.path.join(self.repo_root, self.esm_destination))

    def normalized(self) -> "PackageOptions":
        """Validate the options and return a copy with a normalized repo root."""
        if not isinstance(self.repo_root, str) or not self.repo_root.strip():
            raise OptionsError("repoRoot must be a non-empty path")
        if not isinstance(self.esm_source, str) or not isinstance(self.esm_destination, str):
            raise OptionsError("esmSource and esmDestination must be paths")
        if not self.entry_points:
            raise OptionsError("entryPoints must list at least one file")
        if any(not isinstance(entry, str) or not entry for entry in self.entry_points):
            raise OptionsError("entryPoints must be non-empty strings")
        return replace(
            self,
            repo_root=normalize_repo_root(self.repo_root),
            entry_points=list(self.entry_points),
            resolve_alias=dict(self.resolve_alias),
            resolve_skip=list(self.resolve_skip),
            destination_folder_simplification=dict(self.destination_folder_simplification),
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], *, base_dir: Optional[Path] = None) -> "PackageOptions":
        values: Dict[str, Any] = {}
        for key, value in payload.items():
            name = OPTION_KEYS.get(key, key)
            if name not in OPTION_KEYS.values():
                raise OptionsError(f"Unknown option: {key}")
            values[name] = value

        repo_root = values.get("repo_root")
        if repo_root is None and base_dir is not None:
            repo_root = "."
        repo_root = _as_str(repo_root, "repoRoot")
        if base_dir is not None and not os.path.isabs(repo_root):
            repo_root = str(base_dir / repo_root)

        return cls(
            repo_root=repo_root,
            esm_source=_as_str(values.get("esm_source"), "esmSource", allow_empty=True),
            esm_destination=_as_str(values.get("esm_destination"), "esmDestination", allow_empty=True),
            entry_points=_as_str_list(values.get("entry_points"), "entryPoints"),
            resolve_alias=_as_str_map(values.get("resolve_alias"), "resolveAlias"),
            resolve_skip=_as_str_list(values.get("resolve_skip"), "resolveSkip"),
            destination_folder_simplification=_as_str_map(
                values.get("destination_folder_simplification"),
                "destinationFolderSimplification",
            ),
        )


def normalize_repo_root(repo_root: str) -> str:
    root = os.path.abspath(repo_root)
    if len(root) > 1:
        root = root.rstrip("/\\") or root
    return root


def load_package_options(path: Path) -> PackageOptions:
    """Load options from a JSON config file (// and /* */ comments allowed)."""
    try:
        raw = path.read_text(encoding="utf-8")
        payload = json.loads(mask_comments(raw))
    except (OSError, ValueError) as exc:
        raise OptionsError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise OptionsError(f"Invalid {path.name}: expected a JSON object")
    return PackageOptions.from_dict(payload, base_dir=path.resolve().parent)


def _as_str(value: Any, name: str, *, allow_empty: bool = False) -> str:
    if not isinstance(value, str) or not (allow_empty or value.strip()):
        raise OptionsError(f"{name} must be a {'string' if allow_empty else 'non-empty string'}")
    return value


def _as_str_list(value: Any, name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise OptionsError(f"{name} must be a list of strings")
    return list(value)


def _as_str_map(value: Any, name: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(
        isinstance(key, str) and isinstance(item, str) for key, item in value.items()
    ):
        raise OptionsError(f"{name} must map strings to strings")
    return dict(value)
