#!/usr/bin/env python3
"""
`pbxkit` command-line interface.

The commands are read-only or formatting-only:
- `check`: parse, write, re-parse and write again; report whether the output
  is stable and whether it matches the input byte for byte.
- `summary`: sections, opaque sections and targets with their phases.
- `normalize`: rewrite a project with regenerated annotations.
- `find`: resolve a file GUID by real path or by project path.

Deciding what to change in a project belongs to the calling tooling, which
uses `pbxkit.PBXProject` directly.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import load_config
from .errors import PBXError
from .project import PBXProject


def _load(path: Path) -> PBXProject:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"cannot read {path}: {exc}")
    try:
        return PBXProject.from_string(text)
    except PBXError as exc:
        raise SystemExit(f"{path}: {exc}")


def check_command(args: argparse.Namespace) -> int:
    first = _load(args.path).write_to_string()
    original = args.path.read_text(encoding="utf-8")
    try:
        second = PBXProject.from_string(first).write_to_string()
    except PBXError as exc:
        print(f"[!] {args.path}: output does not re-parse: {exc}")
        return 1
    if first != second:
        print(f"[!] {args.path}: output is not stable across a second round trip")
        return 1
    if first == original:
        print(f"[+] {args.path}: round trip is byte-identical")
    else:
        print(f"[+] {args.path}: round trip is stable (output differs from input formatting)")
    return 0


def summary_command(args: argparse.Namespace) -> int:
    summary = _load(args.path).summary()
    if args.json:
        print(json.dumps(summary, indent=2, sort_keys=True))
        return 0
    print(f"[+] {args.path}")
    for name, count in summary["sections"].items():
        print(f"    {name}: {count}")
    for name, count in summary["opaque"].items():
        print(f"    {name}: {count} raw lines (kept verbatim)")
    for target in summary["targets"]:
        print(f"[+] target {target['name']} ({target['guid']})")
        for phase in target["phases"]:
            print(f"    {phase['label']}: {phase['files']} files")
    return 0


def normalize_command(args: argparse.Namespace) -> int:
    out = args.out or args.path
    text = _load(args.path).write_to_string()
    out.write_text(text, encoding="utf-8")
    print(f"[+] wrote {out}")
    return 0


def find_command(args: argparse.Namespace) -> int:
    project = _load(args.path)
    if args.real_path is not None:
        guid = project.find_file_guid_by_real_path(args.real_path)
    else:
        guid = project.find_file_guid_by_project_path(args.project_path)
    if guid is None:
        print("[!] not found")
        return 1
    print(guid)
    return 0


def main(argv: list[str] | None = None) -> int:
    config = load_config()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.WARNING), format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(prog="pbxkit", description="Inspect and normalize project.pbxproj files.")
    sub = ap.add_subparsers(dest="command", required=True)

    ap_check = sub.add_parser("check", help="Verify that a project round-trips.")
    ap_check.add_argument("path", type=Path)
    ap_check.set_defaults(func=check_command)

    ap_summary = sub.add_parser("summary", help="Summarize sections and targets.")
    ap_summary.add_argument("path", type=Path)
    ap_summary.add_argument("--json", action="store_true", help="Emit JSON instead of text.")
    ap_summary.set_defaults(func=summary_command)

    ap_norm = sub.add_parser("normalize", help="Rewrite a project with regenerated comments.")
    ap_norm.add_argument("path", type=Path)
    ap_norm.add_argument("--out", type=Path, default=None, help="Write here instead of in place.")
    ap_norm.set_defaults(func=normalize_command)

    ap_find = sub.add_parser("find", help="Print the GUID of a file reference.")
    ap_find.add_argument("path", type=Path)
    group = ap_find.add_mutually_exclusive_group(required=True)
    group.add_argument("--real-path", default=None)
    group.add_argument("--project-path", default=None)
    ap_find.set_defaults(func=find_command)

    args = ap.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
