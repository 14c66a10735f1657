"""
Report rendering - JSON-ready dicts and rich tables for analysis results.

Nothing here analyses bytes; it only reshapes the value objects from
``models`` for output.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich import box
from rich.table import Table

from .interpreter import value_offsets
from .models import (ByteGrid, Flag, InterpretedValue, RawByte, Region,
                     ResolvedDefinition, RomAnalysis, ScaledValue, SpaceUsage,
                     TableCandidate)

MISSING_CELL = "--"


# ─── Plain data ─────────────────────────────

def value_to_dict(value: InterpretedValue,
                  offsets: Optional[Sequence[int]] = None) -> Dict[str, Any]:
    if value is None:
        return {"type": "missing"}
    if isinstance(value, Flag):
        return {"type": "flag", "enabled": value.enabled}
    if isinstance(value, RawByte):
        return {"type": "raw", "value": value.value}
    if isinstance(value, ScaledValue):
        return {"type": "scaled", "raw": value.raw, "scaled": value.scaled}
    if isinstance(value, ByteGrid):
        return {"type": "grid", "columns": value.columns,
                "rows": [list(row) for row in value.rows]}

    items = []
    for index, item in enumerate(value):
        entry = value_to_dict(item)
        if offsets is not None:
            entry["offset"] = f"0x{offsets[index]:04X}"
        items.append(entry)
    return {"type": "series", "values": items}


def definition_to_dict(resolved: ResolvedDefinition, value: InterpretedValue) -> Dict[str, Any]:
    fields = resolved.fields
    return {
        "route": resolved.route,
        "address": f"0x{resolved.address.upper()}",
        "bytes": fields.byte_length,
        "bit": fields.bit_width,
        "description": fields.description,
        "notes": fields.notes,
        "scaling_factor": fields.scaling_factor,
        "raw": resolved.raw_bytes.hex().upper(),
        "truncated": resolved.truncated,
        "value": value_to_dict(value, value_offsets(resolved)),
    }


def space_to_dict(tunes: Sequence[Tuple[Region, SpaceUsage]]) -> List[Dict[str, Any]]:
    return [{
        "tune": index,
        "start": f"0x{region.start:04X}",
        "end": f"0x{region.end:04X}",
        "used_bytes": usage.used_bytes,
        "leftover_bytes": usage.leftover_bytes,
    } for index, (region, usage) in enumerate(tunes, 1)]


def tables_to_dict(tables: Sequence[TableCandidate],
                   rows: Optional[List[List[List[int]]]] = None) -> List[Dict[str, Any]]:
    result = []
    for index, table in enumerate(tables):
        entry = {
            "start": f"0x{table.start:04X}",
            "end": f"0x{table.end:04X}",
            "size": table.size,
            "columns": table.column_count,
        }
        if rows is not None:
            entry["rows"] = rows[index]
        result.append(entry)
    return result


def analysis_to_dict(analysis: RomAnalysis) -> Dict[str, Any]:
    return {
        "size": analysis.size,
        "tunes": space_to_dict(analysis.tunes),
        "tables": tables_to_dict(analysis.tables),
        "definitions": [definition_to_dict(r, v) for r, v in analysis.definitions],
        "diagnostics": list(analysis.diagnostics),
    }


# ─── Text ───────────────────────────────────

def describe_value(value: InterpretedValue, offsets: Optional[Sequence[int]] = None) -> str:
    """One-line (or multi-line for grids) human description of a value."""
    if value is None:
        return "missing"
    if isinstance(value, Flag):
        return "Enabled" if value.enabled else "Disabled"
    if isinstance(value, RawByte):
        return f"{value.value:02X} ({value.value})"
    if isinstance(value, ScaledValue):
        return f"{value.raw:02X} ({value.raw} = {value.scaled:g})"
    if isinstance(value, ByteGrid):
        return "\n".join(
            " ".join(MISSING_CELL.rjust(3) if cell is None else f"{cell:>3d}" for cell in row)
            for row in value.rows)

    parts = []
    for index, item in enumerate(value):
        text = describe_value(item)
        parts.append(f"0x{offsets[index]:04X}: {text}" if offsets is not None else text)
    return "\n".join(parts) if parts else "missing"


def space_table(tunes: Sequence[Tuple[Region, SpaceUsage]], file_size: int) -> Table:
    table = Table(title=f"Total file size: {file_size} bytes", box=box.SIMPLE_HEAD)
    table.add_column("Tune")
    table.add_column("Range")
    table.add_column("Used", justify="right")
    table.add_column("Leftover", justify="right")
    for index, (region, usage) in enumerate(tunes, 1):
        table.add_row(str(index), region.label(),
                      f"{usage.used_bytes:,}", f"{usage.leftover_bytes:,}")
    return table


def tables_table(tables: Sequence[TableCandidate]) -> Table:
    table = Table(title=f"Tables found: {len(tables)}", box=box.SIMPLE_HEAD)
    table.add_column("#", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Size", justify="right")
    table.add_column("Columns", justify="right")
    for index, candidate in enumerate(tables, 1):
        table.add_row(str(index), f"0x{candidate.start:04X}", f"0x{candidate.end:04X}",
                      str(candidate.size), str(candidate.column_count))
    return table


def table_rows_table(candidate: TableCandidate, rows: List[List[int]], row_size: int) -> Table:
    """Hex grid of one detected table, one line per scanned row."""
    table = Table(title=f"Table 0x{candidate.start:04X} - 0x{candidate.end:04X}",
                  box=box.MINIMAL)
    table.add_column("Offset")
    for column in range(candidate.column_count):
        table.add_column(str(column + 1), justify="right")
    for index, row in enumerate(rows):
        cells = [f"{byte:02X}" for byte in row]
        cells += [MISSING_CELL] * (candidate.column_count - len(cells))
        table.add_row(f"0x{candidate.start + index * row_size:04X}", *cells)
    return table


def definitions_table(definitions: Sequence[Tuple[ResolvedDefinition, InterpretedValue]]) -> Table:
    table = Table(title="Identified Definitions", box=box.SIMPLE_HEAD, show_lines=True)
    table.add_column("Route")
    table.add_column("Address")
    table.add_column("Bytes", justify="right")
    table.add_column("Description")
    table.add_column("Value")
    for resolved, value in definitions:
        fields = resolved.fields
        size = f"{fields.byte_length}"
        if fields.bit_width:
            size += f" ({fields.bit_width}-bit)"
        description = fields.description
        if fields.notes:
            description += f"\n{fields.notes}"
        table.add_row(resolved.route, f"0x{resolved.address.upper()}", size, description,
                      describe_value(value, value_offsets(resolved)))
    return table
