#!/usr/bin/env python3
"""
romkit - ECU ROM Inspector CLI
==============================

    romkit space   - Used / leftover space per 32KB tune
    romkit tables  - Detect calibration table regions
    romkit defs    - Resolve and interpret catalog definitions
    romkit info    - All of the above in one report

Usage:
    python romkit.py <command> [options]
    python romkit.py <command> --help

Examples:
    python romkit.py space 203.bin
    python romkit.py tables 203.bin --rows
    python romkit.py defs 203.bin --defs 203.json --search vtec
    python romkit.py info 203.bin --defs 203.json --format json -o 203_report.json
"""

import argparse
import json
import logging
import sys
from contextlib import contextmanager

from rich.console import Console

from rom_inspector import (__version__, analyze_rom, analyze_tunes, find_tables,
                           interpret, load_rom, load_schema, resolve, table_rows)
from rom_inspector.constants import MAX_PADDING_ROWS, MIN_TABLE_SIZE, ROW_SIZE
from rom_inspector.errors import RomInspectorError
from rom_inspector.log_setup import setup_logging
from rom_inspector import report

logger = logging.getLogger("rom_inspector.romkit")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("rom", help="ROM image (.bin or .rom, 32KB or 64KB)")
    common.add_argument("--format", choices=["txt", "json"], default="txt",
                        help="Output format (default: txt)")
    common.add_argument("-o", "--output", help="Write report to file instead of stdout")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    common.add_argument("-q", "--quiet", action="store_true",
                        help="Suppress all log output except errors")
    common.add_argument("--log-file", help="Also write a debug log to this file")

    parser = argparse.ArgumentParser(
        prog="romkit",
        description="ECU ROM Inspector - tune space, tables and definitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  space      Used and leftover space per tune
  tables     Detect table regions separated by 0xFF padding
  defs       Resolve catalog definitions and interpret their values
  info       Full report (space, tables, definitions)
""",
    )
    parser.add_argument("--version", action="version", version=f"romkit {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── space ────────────────────────────────────────────────────────────
    sub.add_parser("space", parents=[common], help="Used/leftover space per tune")

    # ── tables ───────────────────────────────────────────────────────────
    p_tab = sub.add_parser("tables", parents=[common], help="Detect table regions")
    p_tab.add_argument("--rows", action="store_true", help="Also dump each table's bytes")
    p_tab.add_argument("--row-size", type=int, default=ROW_SIZE,
                       help=f"Scan row width in bytes (default: {ROW_SIZE})")
    p_tab.add_argument("--max-padding-rows", type=int, default=MAX_PADDING_ROWS,
                       help=f"Blank rows tolerated inside a table (default: {MAX_PADDING_ROWS})")
    p_tab.add_argument("--min-table-size", type=int, default=MIN_TABLE_SIZE,
                       help=f"Smallest reported table in bytes (default: {MIN_TABLE_SIZE})")

    # ── defs ─────────────────────────────────────────────────────────────
    p_defs = sub.add_parser("defs", parents=[common], help="Resolve catalog definitions")
    p_defs.add_argument("--defs", required=True, help="Definition catalog (.json)")
    p_defs.add_argument("--search", help="Only show routes/descriptions containing TEXT")

    # ── info ─────────────────────────────────────────────────────────────
    p_info = sub.add_parser("info", parents=[common], help="Full report")
    p_info.add_argument("--defs", help="Definition catalog (.json)")

    return parser


# ═════════════════════════════════════════════════════════════════════════════
# OUTPUT
# ═════════════════════════════════════════════════════════════════════════════

@contextmanager
def _output_stream(args):
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            yield f
        logger.info(f"Output written to: {args.output}")
    else:
        yield sys.stdout


def _emit(args, data, renderables):
    with _output_stream(args) as stream:
        if args.format == "json":
            stream.write(json.dumps(data, indent=2) + "\n")
        else:
            console = Console(file=stream, width=120 if args.output else None)
            for renderable in renderables:
                console.print(renderable)


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

def cmd_space(args):
    data = load_rom(args.rom)
    tunes = analyze_tunes(data)
    _emit(args, {"size": len(data), "tunes": report.space_to_dict(tunes)},
          [report.space_table(tunes, len(data))])


def cmd_tables(args):
    data = load_rom(args.rom)
    tables = find_tables(data, row_size=args.row_size,
                         max_padding_rows=args.max_padding_rows,
                         min_table_size=args.min_table_size)
    rows = [table_rows(data, t, args.row_size) for t in tables] if args.rows else None

    renderables = [report.tables_table(tables)]
    if rows is not None:
        renderables += [report.table_rows_table(t, r, args.row_size)
                        for t, r in zip(tables, rows)]
    _emit(args, {"tables": report.tables_to_dict(tables, rows)}, renderables)


def cmd_defs(args):
    data = load_rom(args.rom)
    schema = load_schema(args.defs)
    diagnostics = []
    definitions = [(r, interpret(r)) for r in resolve(data, schema, diagnostics)]

    if args.search:
        query = args.search.lower()
        definitions = [(r, v) for r, v in definitions
                       if query in r.route.lower() or query in r.fields.description.lower()]

    _emit(args, {
        "definitions": [report.definition_to_dict(r, v) for r, v in definitions],
        "diagnostics": diagnostics,
    }, [report.definitions_table(definitions)])


def cmd_info(args):
    data = load_rom(args.rom)
    schema = load_schema(args.defs) if args.defs else None
    analysis = analyze_rom(data, schema)

    renderables = [report.space_table(analysis.tunes, analysis.size),
                   report.tables_table(analysis.tables)]
    if schema is not None:
        renderables.append(report.definitions_table(analysis.definitions))
    _emit(args, report.analysis_to_dict(analysis), renderables)


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND DISPATCH TABLE
# ═════════════════════════════════════════════════════════════════════════════

COMMANDS = {
    "space": cmd_space,
    "tables": cmd_tables,
    "defs": cmd_defs,
    "info": cmd_info,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING
    setup_logging(level, log_file=args.log_file)

    try:
        COMMANDS[args.command](args)
    except (RomInspectorError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
