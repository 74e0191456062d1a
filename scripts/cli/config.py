from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from esm_packager import OptionsError, PackageOptions, load_package_options


def parse_pairs(values: Optional[Sequence[str]], flag: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for value in values or []:
        key, sep, target = value.partition("=")
        if not sep or not key:
            raise OptionsError(f"{flag} expects KEY=VALUE, got: {value}")
        pairs[key] = target
    return pairs


def build_options(args: argparse.Namespace) -> PackageOptions:
    """Options from --config, with command-line flags layered on top."""
    if args.config:
        options = load_package_options(Path(args.config))
    else:
        missing: List[str] = [
            flag
            for flag, value in (("--src", args.src), ("--dest", args.dest))
            if value is None
        ]
        if missing:
            raise OptionsError(f"{', '.join(missing)} required without --config")
        options = PackageOptions(
            repo_root=args.repo or ".",
            esm_source=args.src,
            esm_destination=args.dest,
            entry_points=[],
        )
    if args.repo and args.config:
        options.repo_root = args.repo
    if args.src is not None:
        options.esm_source = args.src
    if args.dest is not None:
        options.esm_destination = args.dest
    options.entry_points.extend(args.entry or [])
    options.resolve_alias.update(parse_pairs(args.alias, "--alias"))
    options.resolve_skip.extend(args.skip or [])
    options.destination_folder_simplification.update(parse_pairs(args.simplify, "--simplify"))
    return options.normalized()
