"""Command-line frontend for the shelfintake core pipeline."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from shelfintake.core import (
    InMemoryCatalogStore,
    import_batch,
    parse_text,
    validate_file,
)
from shelfintake.core.api import format_for_filename
from shelfintake.core.validate import FileValidationOptions

load_dotenv(Path(__file__).resolve().parents[2] / ".env")


def _json_dump(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8-sig")


def _declared_format(args: argparse.Namespace) -> str:
    if args.format != "auto" or args.input == "-":
        return args.format
    return format_for_filename(args.input)


def _cmd_parse(args: argparse.Namespace) -> int:
    report = parse_text(
        _read_input(args.input),
        declared_format=_declared_format(args),
        strict=args.strict,
        auto_fix=not args.no_auto_fix,
        enhance=args.enhance,
    )
    payload = report.to_dict()
    if args.report:
        Path(args.report).write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    _json_dump(payload)
    if report.has_critical:
        return 2
    return 0 if report.records else 1


def _cmd_validate_file(args: argparse.Namespace) -> int:
    result = validate_file(args.input, options=FileValidationOptions(max_size_mb=args.max_size_mb))
    _json_dump(result.to_dict())
    return 0 if result.is_valid else 1


def _cmd_import(args: argparse.Namespace) -> int:
    report = parse_text(
        _read_input(args.input),
        declared_format=_declared_format(args),
        strict=args.strict,
        enhance=args.enhance,
    )
    if report.has_critical:
        _json_dump({"parse": report.to_dict(), "result": None})
        return 2

    store = InMemoryCatalogStore()
    if args.limit is not None:
        store.set_plan(args.tenant, args.limit, current=args.current)
    result = import_batch(args.tenant, report.records, store=store)
    _json_dump(
        {
            "parse": {
                "count": len(report.records),
                "errors": [item.to_dict() for item in report.errors],
                "duplicates": report.duplicates,
            },
            "result": result.to_dict(),
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shelfintake", description="Bulk product import CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a pasted product list, CSV or JSON file")
    parse_cmd.add_argument("input", help="Input file path, or - for stdin")
    parse_cmd.add_argument("--format", default="auto", choices=["auto", "text", "json", "csv"])
    parse_cmd.add_argument("--no-auto-fix", action="store_true")
    parse_cmd.add_argument("--strict", action="store_true")
    parse_cmd.add_argument("--enhance", action="store_true", help="Fill in descriptions, tags and suggested sizes")
    parse_cmd.add_argument("--report", default="")
    parse_cmd.set_defaults(func=_cmd_parse)

    validate_cmd = subparsers.add_parser("validate-file", help="Run pre-ingestion checks on an upload")
    validate_cmd.add_argument("input", help="File path")
    validate_cmd.add_argument("--max-size-mb", type=float, default=10)
    validate_cmd.set_defaults(func=_cmd_validate_file)

    import_cmd = subparsers.add_parser("import", help="Parse and import into an in-memory catalog (dry run)")
    import_cmd.add_argument("input", help="Input file path, or - for stdin")
    import_cmd.add_argument("--tenant", required=True)
    import_cmd.add_argument("--format", default="auto", choices=["auto", "text", "json", "csv"])
    import_cmd.add_argument("--limit", type=int, default=None, help="Plan product limit (-1 for unlimited)")
    import_cmd.add_argument("--current", type=int, default=0, help="Products already used on the plan")
    import_cmd.add_argument("--strict", action="store_true")
    import_cmd.add_argument("--enhance", action="store_true", help="Fill in descriptions, tags and suggested sizes")
    import_cmd.set_defaults(func=_cmd_import)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args) or 0)
    except Exception as exc:
        parser.exit(status=2, message=f"error: {exc}\n")


if __name__ == "__main__":
    raise SystemExit(main())
