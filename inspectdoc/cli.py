"""
Command-line interface for inspectdoc.

Usage:
    inspectdoc render record.json --output report.pdf
    inspectdoc render record.json -o report.pdf --conditions FAIR,UNSATISFACTORY --entry-only
    inspectdoc info record.json
    inspectdoc version
"""

import argparse
import json
import sys
from pathlib import Path

from .exceptions import InspectDocError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="inspectdoc",
        description="inspectdoc - paginated PDF reports for property inspections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  inspectdoc render record.json -o report.pdf
  inspectdoc render record.json -o report.pdf --conditions FAIR --entry-only
  inspectdoc info record.json --json
  inspectdoc version
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Log level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a record to PDF")
    render_parser.add_argument("input", help="Input record JSON file")
    render_parser.add_argument(
        "-o", "--output",
        help="Output PDF path (default: input name with .pdf extension)"
    )
    render_parser.add_argument("--config", help="JSON file with layout/fetch overrides")
    render_parser.add_argument(
        "--conditions",
        help="Comma-separated task conditions to include (e.g. FAIR,UNSATISFACTORY)"
    )
    render_parser.add_argument(
        "--entry-only",
        action="store_true",
        help="Only show inspector entries (no location remarks or task media)"
    )
    render_parser.add_argument(
        "--no-media",
        action="store_true",
        help="Leave out photos and videos"
    )
    render_parser.add_argument("--title", help="Report title override")
    render_parser.add_argument("--scope", help="Only include items of this scope (work order) id")

    # Info command
    info_parser = subparsers.add_parser("info", help="Show record information")
    info_parser.add_argument("input", help="Input record JSON file")
    info_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON"
    )

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def cmd_render(args):
    """Handle render command."""
    from .config import load_config
    from .loader import load_record
    from .report import ReportOptions, build_report_pdf

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else input_path.with_suffix(".pdf")
    conditions = tuple(
        value.strip() for value in (args.conditions or "").split(",") if value.strip()
    )

    record = load_record(input_path)
    config = load_config(args.config)
    options = ReportOptions(
        filter_by_scope_id=args.scope,
        allowed_conditions=conditions,
        entry_only=args.entry_only,
        include_media=not args.no_media,
        title=args.title,
        include_meta=False,
    )

    print(f"Rendering: {input_path}")
    build_report_pdf(record, output_path, options, config)
    print(f"Saved: {output_path}")
    return 0


def cmd_info(args):
    """Handle info command."""
    from .loader import load_record

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    record = load_record(input_path)
    stats = _record_stats(record)
    info = {
        "file": str(input_path),
        "id": record.id,
        "contract_type": record.contract_type,
        "status": record.status,
        "customer": record.customer_name,
        "stats": stats,
    }

    if args.json:
        print(json.dumps(info, indent=2, ensure_ascii=False, default=str))
    else:
        print(f"Record: {record.id}")
        print(f"   File: {input_path}")
        if record.customer_name:
            print(f"   Customer: {record.customer_name}")
        print()
        print("Statistics:")
        for key, value in stats.items():
            print(f"   {key}: {value}")

    return 0


def cmd_version(args=None):
    """Handle version command."""
    from .version import __version__
    print(f"inspectdoc v{__version__}")
    print("Paginated PDF reports for property inspections")
    return 0


def _record_stats(record) -> dict:
    tasks = [task for item in record.items for task in item.tasks]
    entries = [entry for item in record.items for entry in item.entries]
    entries.extend(entry for task in tasks for entry in task.entries)
    media = [ref for entry in entries for ref in entry.media]
    media.extend(ref for task in tasks for ref in task.media)
    return {
        "items": len(record.items),
        "locations": sum(len(item.locations) for item in record.items),
        "tasks": len(tasks),
        "entries": len(entries),
        "reported_entries": sum(1 for entry in entries if entry.include_in_report),
        "photos": sum(1 for ref in media if not ref.is_video),
        "videos": sum(1 for ref in media if ref.is_video),
    }


def main(argv=None):
    """Main entry point for CLI."""
    from .utils.logger import configure_logging

    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    commands = {
        "render": cmd_render,
        "info": cmd_info,
        "version": cmd_version,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except InspectDocError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
