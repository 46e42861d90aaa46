"""LinguaBundle command-line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from linguabundle import __version__
from linguabundle.errors import BundleError
from linguabundle.models import ProjectData
from linguabundle.services.bundle import BundleService
from linguabundle.services.keytable import STATUS_FILTERS, filter_keys, overall_progress
from linguabundle.services.settings import STORE_BACKENDS, Settings
from linguabundle.services.store import open_store

log = logging.getLogger("linguabundle.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linguabundle",
        description="Manage multi-locale JSON translation bundles",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--store", choices=STORE_BACKENDS, help="Store backend")
    parser.add_argument("--store-path", help="Store file location")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="Create a project from a ZIP archive")
    p.add_argument("archive", type=Path)
    p.add_argument("--name", help="Project name")

    p = sub.add_parser("export", help="Write a project to a ZIP archive")
    p.add_argument("project_id")
    p.add_argument("-o", "--output", type=Path, required=True)

    sub.add_parser("list", help="List projects")

    p = sub.add_parser("stats", help="Per-locale completeness")
    p.add_argument("project_id")

    p = sub.add_parser("keys", help="List translation keys")
    p.add_argument("project_id")
    p.add_argument("--search", default="", help="Substring of the key path")
    p.add_argument("--file", help="Only keys of this file")
    p.add_argument("--status", choices=STATUS_FILTERS, default="all")

    p = sub.add_parser("edit", help="Set one translated string")
    p.add_argument("project_id")
    p.add_argument("file")
    p.add_argument("key")
    p.add_argument("locale")
    p.add_argument("value")

    p = sub.add_parser("add-locale", help="Add a locale templated from English")
    p.add_argument("project_id")
    p.add_argument("code")

    return parser


def _print_stats(data: ProjectData) -> None:
    print(f"{data.project.name} ({data.project.id})")
    for s in data.stats:
        print(f"  {s.locale:<10} {s.translated_keys:>6}/{s.total_keys:<6} {s.completeness:>3}%")
    print(f"  overall {overall_progress(data.stats)}%")


def _run(args, service: BundleService) -> None:
    if args.command == "import":
        data = service.import_archive(args.archive.read_bytes(), args.name)
        if args.json:
            print(json.dumps(data.to_dict(), ensure_ascii=False, indent=2))
        else:
            _print_stats(data)

    elif args.command == "export":
        args.output.write_bytes(service.export_archive(args.project_id))
        print(args.output)

    elif args.command == "list":
        projects = service.list_projects()
        if args.json:
            print(json.dumps([p.to_dict() for p in projects], ensure_ascii=False, indent=2))
        else:
            for p in projects:
                print(f"{p.id}  {p.name}  [{', '.join(p.locales)}]")

    elif args.command == "stats":
        data = service.get_project_data(args.project_id)
        if args.json:
            print(json.dumps([s.to_dict() for s in data.stats], indent=2))
        else:
            _print_stats(data)

    elif args.command == "keys":
        data = service.get_project_data(args.project_id)
        keys = filter_keys(data.keys, data.project.locales, query=args.search,
                           filename=args.file, status=args.status)
        if args.json:
            print(json.dumps([k.to_dict() for k in keys], ensure_ascii=False, indent=2))
        else:
            for k in keys:
                values = ", ".join(f"{loc}={k.translations[loc]!r}"
                                   for loc in data.project.locales if loc in k.translations)
                print(f"{k.file}:{k.key}  {values}")

    elif args.command == "edit":
        tf = service.update_translation(args.project_id, args.file, args.key,
                                        args.locale, args.value)
        print(f"{tf.locale}/{tf.filename} updated {tf.updated_at}")

    elif args.command == "add-locale":
        data = service.add_locale(args.project_id, args.code)
        if args.json:
            print(json.dumps(data.to_dict(), ensure_ascii=False, indent=2))
        else:
            _print_stats(data)


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings.get()
    level = logging.DEBUG if args.verbose else getattr(
        logging, str(settings["log_level"]).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(name)s: %(message)s")

    try:
        with open_store(settings, backend=args.store, path=args.store_path) as store:
            _run(args, BundleService.from_settings(store, settings))
    except BundleError as e:
        print(f"error ({e.kind}): {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
