#!/usr/bin/env python3
"""ESM packager CLI: copy the files reachable from entry points with resolvable imports."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from esm_packager import FileAccessError, PackagingError, PackagingSession, get_git_version
from .config import build_options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="esm-packager",
        description="Package ES modules reachable from entry points into a self-contained tree",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    package = sub.add_parser("package", help="Copy reachable modules and rewrite bare imports")
    package.add_argument("--config", default=None, help="JSON options file (comments allowed)")
    package.add_argument("--repo", default=None, help="Repo root (default: config dir or .)")
    package.add_argument("--src", default=None, help="Source directory, relative to the repo root")
    package.add_argument("--dest", default=None, help="Destination directory, relative to the repo root")
    package.add_argument(
        "--entry",
        action="append",
        default=None,
        help="Entry point relative to --src (repeatable)",
    )
    package.add_argument(
        "--alias",
        action="append",
        default=None,
        metavar="SPEC=PATH",
        help="Resolve SPEC to an absolute file PATH (repeatable)",
    )
    package.add_argument(
        "--skip",
        action="append",
        default=None,
        metavar="PREFIX",
        help="Leave specifiers starting with PREFIX untouched (repeatable)",
    )
    package.add_argument(
        "--simplify",
        action="append",
        default=None,
        metavar="FROM=TO",
        help="Shorten third-party destination paths by replacing FROM with TO (repeatable)",
    )
    package.add_argument("--json", action="store_true", help="Emit a machine-readable JSON report")

    version = sub.add_parser("git-version", help="Print the commit id checked out in the repo")
    version.add_argument("--repo", default=".", help="Repo root (default: .)")
    return parser


def report_failure(args: argparse.Namespace, report: Dict[str, Any], err: PackagingError) -> int:
    if args.json:
        report["error"] = err.to_dict()
        print(json.dumps(report, sort_keys=True, separators=(",", ":")))
    else:
        print(f"error: {err.format_human()}", file=sys.stderr)
    return 2


def run_package(args: argparse.Namespace) -> int:
    report: Dict[str, Any] = {"ok": False}
    try:
        options = build_options(args)
        report["destination"] = options.destination_dir
        packaged = PackagingSession(options).run()
    except PackagingError as err:
        return report_failure(args, report, err)
    except OSError as exc:
        return report_failure(args, report, FileAccessError(exc))

    report["ok"] = True
    report["files_written"] = len(packaged)
    report["imports_rewritten"] = sum(item.rewritten for item in packaged)
    if args.json:
        print(json.dumps(report, sort_keys=True, separators=(",", ":")))
        return 0
    lines: List[str] = [
        f"FILES_WRITTEN: {report['files_written']}",
        f"IMPORTS_REWRITTEN: {report['imports_rewritten']}",
        f"DESTINATION: {report['destination']}",
    ]
    print("\n".join(lines))
    return 0


def run_git_version(args: argparse.Namespace) -> int:
    version = get_git_version(args.repo)
    if not version:
        print(f"error: no git commit found for {args.repo}", file=sys.stderr)
        return 1
    print(version)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd == "package":
        return run_package(args)
    if args.cmd == "git-version":
        return run_git_version(args)
    parser.error(f"unknown command: {args.cmd}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
